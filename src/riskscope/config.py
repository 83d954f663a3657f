import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))


def _env_list(name: str) -> Optional[List[str]]:
    value = os.getenv(name, "")
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


DEFAULT_CONFIG = {
    "user_agent": os.getenv("RISKSCOPE_USER_AGENT", "riskscope/1.0"),
    "request_timeout": float(os.getenv("RISKSCOPE_REQUEST_TIMEOUT", "10")),
    "http_proxy": os.getenv("RISKSCOPE_HTTP_PROXY", os.getenv("HTTP_PROXY", "")),
    "https_proxy": os.getenv("RISKSCOPE_HTTPS_PROXY", os.getenv("HTTPS_PROXY", "")),
    "verify_tls": os.getenv("RISKSCOPE_VERIFY_TLS", "true").lower() != "false",
    "geo_api_url": os.getenv("RISKSCOPE_GEO_API_URL", "https://ipwho.is"),
    "dns_nameservers": _env_list("RISKSCOPE_DNS_NAMESERVERS"),
    # None means the built-in default blacklist.
    "domain_blacklist": _env_list("RISKSCOPE_DOMAIN_BLACKLIST"),
    "json_output": False,
}

DEFAULT_CONFIG_PATHS = [
    Path("riskscope.config.json"),
    Path("riskscope.json"),
    Path.home() / ".riskscope.json",
]


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    paths = [Path(config_path)] if config_path else DEFAULT_CONFIG_PATHS

    config: Dict[str, Any] = dict(DEFAULT_CONFIG)
    for path in paths:
        if path and path.exists() and path.is_file():
            try:
                with path.open("r", encoding="utf-8") as f:
                    file_config = json.load(f)
                if isinstance(file_config, dict):
                    config.update(file_config)
            except (OSError, ValueError):
                pass
            break

    return config


def apply_proxy_env(config: Dict[str, Any]) -> None:
    http_proxy = config.get("http_proxy") or ""
    https_proxy = config.get("https_proxy") or ""
    if http_proxy:
        os.environ["HTTP_PROXY"] = http_proxy
        os.environ["http_proxy"] = http_proxy
    if https_proxy:
        os.environ["HTTPS_PROXY"] = https_proxy
        os.environ["https_proxy"] = https_proxy


def scan_options(config: Dict[str, Any]) -> Dict[str, Any]:
    """Keyword arguments for ``enrichment.scan_url`` taken from ``config``."""
    proxies = {}
    if config.get("http_proxy"):
        proxies["http"] = config["http_proxy"]
    if config.get("https_proxy"):
        proxies["https"] = config["https_proxy"]

    try:
        timeout = float(config.get("request_timeout", 10))
    except (TypeError, ValueError):
        timeout = 10.0

    return {
        "geo_api_url": config.get("geo_api_url"),
        "nameservers": config.get("dns_nameservers"),
        "request_timeout": timeout,
        "verify_tls": bool(config.get("verify_tls", True)),
        "proxies": proxies or None,
        "user_agent": config.get("user_agent"),
    }


def load_blacklist_file(path: str) -> List[str]:
    """One domain per line; blank lines and ``#`` comments are skipped."""
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    return [line for line in lines if line and not line.startswith("#")]
