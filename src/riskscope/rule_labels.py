import re
from typing import Iterable, List

from riskscope.risk_scoring import DANGEROUS, SAFE, SUSPICIOUS, RuleOutcome

# Analyst-friendly names for rule ids.
RULE_LABELS = {
    "phishing_keywords": "Phishing keywords",
    "length_over_100": "Excessive URL length",
    "raw_ip_host": "Raw IP hostname",
    "special_chars_over_4": "High special-character density",
    "domain_blacklisted": "Domain blacklisted",
    "uses_http": "Insecure protocol (HTTP)",
    "https_long_domain_bonus": "HTTPS reputation bonus",
}

CLASSIFICATION_LABELS = {
    SAFE: "SAFE",
    SUSPICIOUS: "SUSPICIOUS",
    DANGEROUS: "DANGEROUS",
}

CLASSIFICATION_STYLES = {
    SAFE: "bold green",
    SUSPICIOUS: "bold yellow",
    DANGEROUS: "bold red",
}


def title_case_from_id(rule_id: str) -> str:
    text = re.sub(r"[_-]+", " ", rule_id).strip()
    text = re.sub(r"\s+", " ", text)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def get_risk_rule_label(rule_id: str) -> str:
    return RULE_LABELS.get(rule_id) or title_case_from_id(rule_id)


def get_classification_label(classification: str) -> str:
    return CLASSIFICATION_LABELS.get(classification, str(classification).upper())


def format_points(points: int) -> str:
    return f"+{points}" if points > 0 else str(points)


def sort_breakdown_by_impact(breakdown: Iterable[RuleOutcome]) -> List[RuleOutcome]:
    """Largest absolute contribution first; ties keep evaluation order."""
    return sorted(breakdown, key=lambda item: abs(item.points), reverse=True)
