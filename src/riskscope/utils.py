import os
from typing import Dict, Optional

import pyfiglet
import requests
from requests.adapters import HTTPAdapter
from urllib3 import Retry
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.panel import Panel
from rich.box import ROUNDED
from rich.markup import escape

from riskscope.risk_scoring import RuleOutcome
from riskscope.rule_labels import (
    CLASSIFICATION_STYLES,
    format_points,
    get_classification_label,
    get_risk_rule_label,
    sort_breakdown_by_impact,
)

console = Console()

DEFAULT_USER_AGENT = "riskscope/1.0"


def build_http_session(
    user_agent: Optional[str] = None,
    retries: int = 2,
    backoff: float = 0.5,
    proxies: Optional[Dict[str, str]] = None,
) -> requests.Session:
    session = requests.Session()
    session.headers.update({
        "User-Agent": user_agent or os.getenv("RISKSCOPE_USER_AGENT") or DEFAULT_USER_AGENT
    })
    retry = Retry(
        total=retries,
        read=retries,
        connect=retries,
        backoff_factor=backoff,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset(["HEAD", "GET"]),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    if proxies:
        session.proxies.update(proxies)
    return session


def dedupe_targets(targets):
    seen = set()
    deduped = []
    for target in targets:
        key = target.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        deduped.append(target)
    return deduped


def classification_text(classification: str) -> Text:
    return Text(
        get_classification_label(classification),
        style=CLASSIFICATION_STYLES.get(classification, "bold"),
    )


def print_results_table(results):
    table = Table(show_header=True, header_style="bold magenta", box=ROUNDED, expand=True)
    table.add_column("Target", style="cyan", justify="left", overflow="fold")
    table.add_column("Score", justify="right")
    table.add_column("Classification", justify="left")
    table.add_column("IP", style="green", justify="left")
    table.add_column("Country", style="green", justify="left")

    for entry in results:
        if entry.get("error"):
            table.add_row(Text(entry["target"]), "-", Text("ERROR", style="bold red"),
                          "-", Text(entry["error"], style="red"))
            continue
        table.add_row(
            Text(entry["target"]),
            str(entry.get("score", "N/A")),
            classification_text(entry.get("classification", "")),
            entry.get("ip", "N/A"),
            entry.get("country", "N/A"),
        )

    panel = Panel.fit(table, title="[bold magenta]Risk Scores[/bold magenta]", border_style="magenta")
    console.print(panel)


def print_breakdown(entry: dict):
    breakdown = [RuleOutcome(**item) for item in entry.get("breakdown", [])]
    title = f"[bold cyan]Risk Signals: {escape(entry.get('target', ''))}[/bold cyan]"

    if not breakdown:
        console.print(Panel("[green]No risk signals returned.[/green]", title=title, border_style="cyan"))
        return

    signals = Table.grid(padding=(0, 1))
    signals.add_column(justify="right", style="bold")
    signals.add_column(style="cyan")
    signals.add_column(ratio=3, overflow="fold")

    for item in sort_breakdown_by_impact(breakdown):
        points_style = "red" if item.points > 0 else "green"
        signals.add_row(
            Text(format_points(item.points), style=points_style),
            get_risk_rule_label(item.rule),
            Text(item.detail, style="dim"),
        )

    console.print(Panel(signals, title=title, border_style="cyan"))


def print_banner():
    ascii_banner = pyfiglet.figlet_format("riskscope", font="ansi_shadow")
    console.print("\n")
    console.print(f"[bold cyan]{ascii_banner}[/bold cyan]")
    console.print(
        "[bold white]🔍 URL triage[/bold white] for "
        "[magenta]phishing[/magenta] and [red]malicious hosting[/red] investigations."
    )
    console.print("\n")
