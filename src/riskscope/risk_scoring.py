import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import unquote, urlsplit

PHISHING_KEYWORDS = ["login", "verify", "update", "secure", "account", "free", "bonus", "win"]
SPECIAL_CHARS = {"?", "&", "%", "=", "@", "-", "_"}

# Keep this short and editable; callers can pass their own list.
DEFAULT_DOMAIN_BLACKLIST = (
    "example-phish.com",
    "badactor.net",
    "malware-test.invalid",
)

SAFE = "Safe"
SUSPICIOUS = "Suspicious"
DANGEROUS = "Dangerous"

RULE_PHISHING_KEYWORDS = "phishing_keywords"
RULE_LENGTH_OVER_100 = "length_over_100"
RULE_RAW_IP_HOST = "raw_ip_host"
RULE_SPECIAL_CHARS_OVER_4 = "special_chars_over_4"
RULE_DOMAIN_BLACKLISTED = "domain_blacklisted"
RULE_USES_HTTP = "uses_http"
RULE_HTTPS_LONG_DOMAIN_BONUS = "https_long_domain_bonus"

RULE_IDS = (
    RULE_PHISHING_KEYWORDS,
    RULE_LENGTH_OVER_100,
    RULE_RAW_IP_HOST,
    RULE_SPECIAL_CHARS_OVER_4,
    RULE_DOMAIN_BLACKLISTED,
    RULE_USES_HTTP,
    RULE_HTTPS_LONG_DOMAIN_BONUS,
)

SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")
IPV4_RE = re.compile(
    r"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])"
    r"(?:\.(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9]?[0-9])){3}"
)
IPV6_LIKE_RE = re.compile(r"[0-9A-Fa-f:]+")

# Schemes that must carry a host to be a valid URL ("file" may be host-less).
HOST_SCHEMES = {"http", "https", "ftp", "ws", "wss"}
FORBIDDEN_HOST_CHARS = set(" \t\n\r#/<>?@[\\]^|%")
HEX_DIGITS = set("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class ParsedTarget:
    hostname: str = ""
    scheme: Optional[str] = None


@dataclass(frozen=True)
class RuleOutcome:
    rule: str
    points: int
    detail: str


@dataclass(frozen=True)
class RiskResult:
    score: int
    classification: str
    triggered_rules: Tuple[str, ...]
    breakdown: Tuple[RuleOutcome, ...]
    raw_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "classification": self.classification,
            "triggered_rules": list(self.triggered_rules),
            "breakdown": [asdict(item) for item in self.breakdown],
            "raw_score": self.raw_score,
        }


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    return min(high, max(low, value))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _ipv4_number(part: str) -> Optional[int]:
    """Parse one IPv4 part in decimal, ``0x`` hex or leading-zero octal."""
    if not part:
        return None
    if part[:2].lower() == "0x":
        digits, radix = part[2:], 16
        if not set(digits) <= HEX_DIGITS:
            return None
    elif len(part) > 1 and part[0] == "0":
        digits, radix = part[1:], 8
        if not set(digits) <= set("01234567"):
            return None
    else:
        digits, radix = part, 10
        if not (digits.isascii() and digits.isdigit()):
            return None
    return int(digits, radix) if digits else 0


def _ends_in_number(host: str) -> bool:
    parts = host.split(".")
    if parts[-1] == "" and len(parts) > 1:
        parts.pop()
    last = parts[-1]
    if last and last.isascii() and last.isdigit():
        return True
    return last[:2].lower() == "0x" and _ipv4_number(last) is not None


def _parse_ipv4_host(host: str) -> Optional[str]:
    """
    Rewrite a numeric host the way browsers do (``3232235777``,
    ``0x7f.1`` and ``010.0.0.1`` become dotted quads). Returns None when
    the host is not a valid IPv4 address.
    """
    parts = host.split(".")
    if parts[-1] == "" and len(parts) > 1:
        parts.pop()
    if len(parts) > 4:
        return None

    numbers = [_ipv4_number(part) for part in parts]
    if any(n is None for n in numbers):
        return None
    if any(n > 255 for n in numbers[:-1]):
        return None
    if numbers[-1] >= 256 ** (5 - len(numbers)):
        return None

    address = numbers[-1]
    for i, n in enumerate(numbers[:-1]):
        address += n * 256 ** (3 - i)
    return ".".join(str((address >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def _parse_url(value: str) -> Optional[ParsedTarget]:
    """Parse ``value`` as an absolute URL, or return None when it is not one."""
    if not SCHEME_RE.match(value):
        return None

    scheme, _, rest = value.partition(":")
    scheme = scheme.lower()

    if scheme in HOST_SCHEMES:
        # Browsers treat backslashes as slashes and tolerate any number of
        # slashes after the scheme for these.
        rest = rest.replace("\\", "/").lstrip("/")
        candidate = f"{scheme}://{rest}"
    elif scheme == "file":
        candidate = scheme + ":" + rest.replace("\\", "/")
    elif rest.startswith("//"):
        candidate = f"{scheme}:{rest}"
    else:
        return ParsedTarget(hostname="", scheme=scheme)

    try:
        parts = urlsplit(candidate)
        hostname = (parts.hostname or "").lower()
        parts.port  # raises ValueError when out of range
    except ValueError:
        return None

    if scheme in HOST_SCHEMES and not hostname:
        return None

    # IPv6 literals come back from urlsplit without brackets.
    if ":" not in hostname:
        if scheme in HOST_SCHEMES or scheme == "file":
            hostname = unquote(hostname).lower()
            if any(ord(ch) < 0x20 or ch == "\x7f" for ch in hostname):
                return None
        if FORBIDDEN_HOST_CHARS.intersection(hostname):
            return None
        if hostname and (scheme in HOST_SCHEMES or scheme == "file") and _ends_in_number(hostname):
            hostname = _parse_ipv4_host(hostname)
            if hostname is None:
                return None

    return ParsedTarget(hostname=hostname, scheme=scheme)


def parse_target(target: Optional[str]) -> ParsedTarget:
    """
    Loosely parse a target: as-is first, then with ``https://`` prepended.
    Unparseable input yields an empty hostname and no scheme.
    """
    raw = _as_text(target).strip()
    if not raw:
        return ParsedTarget()

    for candidate in (raw, f"https://{raw}"):
        parsed = _parse_url(candidate)
        if parsed is not None:
            return parsed

    return ParsedTarget()


def is_raw_ip(hostname: str) -> bool:
    host = (hostname or "").strip()
    if IPV4_RE.fullmatch(host):
        return True
    if ":" not in host or not IPV6_LIKE_RE.fullmatch(host):
        return False
    # Loose IPv6: at least two colons.
    return host.count(":") >= 2


def count_special_chars(value: str) -> int:
    return sum(1 for ch in value if ch in SPECIAL_CHARS)


def classify_score(score: int) -> str:
    if score <= 20:
        return SAFE
    elif score <= 50:
        return SUSPICIOUS
    else:
        return DANGEROUS


def normalize_blacklist(blacklist: Optional[Iterable[str]] = None) -> List[str]:
    entries = DEFAULT_DOMAIN_BLACKLIST if blacklist is None else blacklist
    return [str(d).strip().lower() for d in entries]


def score_url_risk(target: Optional[str], blacklist: Optional[Iterable[str]] = None) -> RiskResult:
    """
    Score a domain or URL with the fixed heuristic rule set.

    Rules are evaluated in order and all applicable rules fire; the summed
    points are clamped to [0, 100] and classified as Safe (<= 20),
    Suspicious (21-50) or Dangerous (>= 51). Never raises.
    """
    breakdown: List[RuleOutcome] = []

    def fire(rule: str, points: int, detail: str) -> None:
        breakdown.append(RuleOutcome(rule=rule, points=points, detail=detail))

    domains = normalize_blacklist(blacklist)
    normalized = _as_text(target).strip()
    normalized_lower = normalized.lower()
    parsed = parse_target(normalized)
    hostname = parsed.hostname

    matched = [k for k in PHISHING_KEYWORDS if k in normalized_lower]
    if matched:
        fire(RULE_PHISHING_KEYWORDS, 30, f"Matched keywords: {', '.join(matched)}")

    if len(normalized) > 100:
        fire(RULE_LENGTH_OVER_100, 25, f"Length: {len(normalized)}")

    if hostname and is_raw_ip(hostname):
        fire(RULE_RAW_IP_HOST, 30, f"Hostname is an IP: {hostname}")

    special_count = count_special_chars(normalized)
    if special_count > 4:
        fire(RULE_SPECIAL_CHARS_OVER_4, 15, f"Special characters count: {special_count}")

    if hostname and hostname in domains:
        fire(RULE_DOMAIN_BLACKLISTED, 25, f"Blacklisted domain: {hostname}")

    if parsed.scheme == "http":
        fire(RULE_USES_HTTP, 20, "URL uses http")

    # Domain length is the hostname length.
    if parsed.scheme == "https" and len(hostname) > 6:
        fire(RULE_HTTPS_LONG_DOMAIN_BONUS, -20, f"HTTPS + hostname length {len(hostname)}")

    raw_score = sum(item.points for item in breakdown)
    score = clamp(raw_score)

    return RiskResult(
        score=score,
        classification=classify_score(score),
        triggered_rules=tuple(item.rule for item in breakdown),
        breakdown=tuple(breakdown),
        raw_score=raw_score,
    )
