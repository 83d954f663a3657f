from riskscope.risk_scoring import (
    DEFAULT_DOMAIN_BLACKLIST,
    RiskResult,
    RuleOutcome,
    classify_score,
    parse_target,
    score_url_risk,
)

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_DOMAIN_BLACKLIST",
    "RiskResult",
    "RuleOutcome",
    "classify_score",
    "parse_target",
    "score_url_risk",
]
