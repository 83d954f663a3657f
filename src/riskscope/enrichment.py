import math
import os
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

import dns.exception
import dns.resolver
import requests

from riskscope.risk_scoring import is_raw_ip, parse_target, score_url_risk
from riskscope.utils import build_http_session

DEFAULT_GEO_API_URL = "https://ipwho.is"


class ScanError(Exception):
    """Base error for a scan that could not be completed."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTargetError(ScanError):
    status_code = 400


class DnsResolutionError(ScanError):
    pass


class GeoLookupError(ScanError):
    pass


def get_request_timeout() -> float:
    try:
        return float(os.getenv("RISKSCOPE_REQUEST_TIMEOUT", "10"))
    except ValueError:
        return 10.0


def get_proxies() -> Optional[dict]:
    http_proxy = os.getenv("RISKSCOPE_HTTP_PROXY") or os.getenv("HTTP_PROXY")
    https_proxy = os.getenv("RISKSCOPE_HTTPS_PROXY") or os.getenv("HTTPS_PROXY")
    proxies = {}
    if http_proxy:
        proxies["http"] = http_proxy
    if https_proxy:
        proxies["https"] = https_proxy
    return proxies or None


def http_get(url: str, **kwargs):
    timeout = kwargs.pop("timeout", get_request_timeout())
    proxies = kwargs.pop("proxies", get_proxies())
    verify = kwargs.pop("verify", os.getenv("RISKSCOPE_VERIFY_TLS", "true").lower() != "false")
    session = build_http_session(user_agent=kwargs.pop("user_agent", None), proxies=proxies)
    with session:
        return session.get(url, timeout=timeout, verify=verify, **kwargs)


def resolve_ip(
    hostname: str,
    nameservers: Optional[List[str]] = None,
    timeout: Optional[float] = None,
) -> str:
    """Resolve ``hostname`` to its first A record. Raw IPs are returned unchanged."""
    if is_raw_ip(hostname):
        return hostname

    resolver = dns.resolver.Resolver()
    if nameservers:
        resolver.nameservers = list(nameservers)
    resolver.lifetime = timeout if timeout is not None else get_request_timeout()

    try:
        answers = resolver.resolve(hostname, "A")
    except (dns.resolver.NXDOMAIN, dns.resolver.NoAnswer):
        raise DnsResolutionError("No A record found")
    except dns.exception.DNSException as e:
        raise DnsResolutionError(f"DNS resolve failed ({e.__class__.__name__})") from e

    records = [r.to_text() for r in answers if r.to_text()]
    if not records:
        raise DnsResolutionError("No A record found")
    return records[0]


def geo_lookup(ip: str, api_url: Optional[str] = None, **http_options) -> Dict[str, Any]:
    """
    Look up ``ip`` against an ipwho.is-compatible API. ``http_options``
    (timeout, verify, proxies, user_agent) go to ``http_get``; unset ones
    fall back to the environment.
    """
    base_url = (api_url or os.getenv("RISKSCOPE_GEO_API_URL") or DEFAULT_GEO_API_URL).rstrip("/")
    options = {k: v for k, v in http_options.items() if v is not None}
    try:
        r = http_get(f"{base_url}/{quote(ip, safe='')}", **options)
    except requests.RequestException as e:
        raise GeoLookupError(f"Geo lookup failed ({e.__class__.__name__})") from e

    if not r.ok:
        raise GeoLookupError(f"Geo lookup failed ({r.status_code})")

    try:
        data = r.json()
    except ValueError:
        raise GeoLookupError("Geo lookup returned invalid JSON")

    if not isinstance(data, dict) or not data.get("success"):
        message = data.get("message") if isinstance(data, dict) else None
        raise GeoLookupError(message if isinstance(message, str) else "Unknown geo lookup error")

    try:
        lat = float(data.get("latitude"))
        lon = float(data.get("longitude"))
    except (TypeError, ValueError):
        lat = lon = math.nan
    if not math.isfinite(lat) or not math.isfinite(lon):
        raise GeoLookupError("Geo lookup returned invalid coordinates")

    country = data.get("country") if isinstance(data.get("country"), str) else ""
    return {"lat": lat, "lon": lon, "country": country or "—"}


def scan_url(
    url: Optional[str],
    blacklist: Optional[Iterable[str]] = None,
    geo_api_url: Optional[str] = None,
    nameservers: Optional[List[str]] = None,
    request_timeout: Optional[float] = None,
    verify_tls: Optional[bool] = None,
    proxies: Optional[Dict[str, str]] = None,
    user_agent: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Resolve the target's host, geo-locate it and score it.

    Raises InvalidTargetError for empty or host-less input, and
    DnsResolutionError / GeoLookupError when a lookup fails.
    """
    target = (url or "").strip()
    if not target:
        raise InvalidTargetError("Missing url")

    hostname = parse_target(target).hostname
    if not hostname:
        raise InvalidTargetError("Invalid URL")

    ip = resolve_ip(hostname, nameservers=nameservers, timeout=request_timeout)
    geo = geo_lookup(
        ip,
        api_url=geo_api_url,
        timeout=request_timeout,
        verify=verify_tls,
        proxies=proxies,
        user_agent=user_agent,
    )
    risk = score_url_risk(target, blacklist=blacklist)

    return {
        "lat": geo["lat"],
        "lon": geo["lon"],
        "country": geo["country"],
        "ip": ip,
        "score": risk.score,
        "status": risk.classification,
        "breakdown": risk.to_dict()["breakdown"],
    }
