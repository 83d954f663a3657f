import csv
import json
from pathlib import Path
from rich.console import Console

from riskscope.rule_labels import format_points, get_classification_label, get_risk_rule_label

console = Console()

CSV_FIELDS = ["target", "score", "classification", "triggered_rules", "ip", "country", "lat", "lon", "error"]


def _csv_row(entry):
    row = dict(entry)
    row["triggered_rules"] = ";".join(entry.get("triggered_rules", []))
    return row


def export_data(data, fmt, output, save_dir="exports"):
    """Write scan results (a list of dicts) to ``save_dir/output.fmt``; returns the path."""
    if not isinstance(data, list):
        console.print("[red]Export failed:[/red] data must be a list of dicts.")
        return None

    export_path = Path(save_dir)
    export_path.mkdir(parents=True, exist_ok=True)

    filename = export_path / f"{output}.{fmt}"

    if fmt == "csv":
        with open(filename, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(_csv_row(entry) for entry in data)

    elif fmt == "json":
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    elif fmt == "txt":
        with open(filename, "w", encoding="utf-8") as f:
            for entry in data:
                f.write(f"Target: {entry.get('target', 'N/A')}\n")
                if entry.get("error"):
                    f.write(f"  Error: {entry['error']}\n")
                if "score" in entry:
                    label = get_classification_label(entry.get("classification", ""))
                    f.write(f"  Risk Score: {entry['score']} ({label})\n")
                if entry.get("ip"):
                    f.write(f"  Hosting: {entry['ip']} / {entry.get('country', 'N/A')}\n")
                for item in entry.get("breakdown", []):
                    f.write(
                        f"  [{format_points(item['points'])}] {get_risk_rule_label(item['rule'])}: "
                        f"{item['detail']}\n"
                    )
                f.write("\n")

    else:
        console.print(f"[red]Export failed:[/red] unsupported format '{fmt}'.")
        return None

    console.print(f"[green]Exported results to [bold]{filename}[/bold]")
    return filename
