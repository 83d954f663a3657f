from pathlib import Path
from datetime import datetime, timezone
import csv
import json
from typing import Any, Dict, Iterable, Optional


LOG_DIR = Path("logs")
EVENT_LOG_FILE = LOG_DIR / "events.jsonl"
HISTORY_LOG_FILE = LOG_DIR / "history.csv"


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def log_scan_history(results: Iterable[Dict[str, Any]]) -> None:
    HISTORY_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

    is_new = not HISTORY_LOG_FILE.exists()
    with HISTORY_LOG_FILE.open("a", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        if is_new:
            writer.writerow(["timestamp", "target", "score", "classification", "triggered_rules"])

        for result in results:
            writer.writerow([
                _utcnow(),
                result.get("target", ""),
                result.get("score", ""),
                result.get("classification", ""),
                ";".join(result.get("triggered_rules", [])),
            ])


def log_event(event: str, data: Optional[Dict[str, Any]] = None, level: str = "info") -> None:
    payload = {
        "timestamp": _utcnow(),
        "level": level,
        "event": event,
        "data": data or {},
    }
    try:
        EVENT_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with EVENT_LOG_FILE.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
    except OSError:
        pass
