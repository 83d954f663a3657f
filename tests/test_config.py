"""Tests for configuration loading and the event / history logs."""

import csv
import json
import os

from riskscope import logger
from riskscope.config import (
    DEFAULT_CONFIG,
    apply_proxy_env,
    load_blacklist_file,
    load_config,
    scan_options,
)


class TestLoadConfig:
    def test_explicit_file_overrides_defaults(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"domain_blacklist": ["evil.test"], "request_timeout": 3}), encoding="utf-8")

        config = load_config(str(path))

        assert config["domain_blacklist"] == ["evil.test"]
        assert config["request_timeout"] == 3
        assert config["geo_api_url"] == DEFAULT_CONFIG["geo_api_url"]

    def test_invalid_json_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_config(str(path)) == DEFAULT_CONFIG

    def test_missing_file(self, tmp_path):
        assert load_config(str(tmp_path / "absent.json")) == DEFAULT_CONFIG

    def test_default_paths(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "riskscope.json").write_text('{"verify_tls": false}', encoding="utf-8")

        assert load_config()["verify_tls"] is False

    def test_defaults_copy(self):
        config = load_config("/nonexistent/riskscope.json")
        config["json_output"] = True
        assert DEFAULT_CONFIG["json_output"] is False


class TestProxies:
    def test_apply_proxy_env(self, monkeypatch):
        for name in ("HTTP_PROXY", "http_proxy", "HTTPS_PROXY", "https_proxy"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("HTTPS_PROXY", "unchanged")

        apply_proxy_env({"http_proxy": "http://p:8080", "https_proxy": ""})

        assert os.environ["HTTP_PROXY"] == "http://p:8080"
        assert os.environ["http_proxy"] == "http://p:8080"
        assert os.environ["HTTPS_PROXY"] == "unchanged"


class TestScanOptions:
    def test_from_config(self):
        options = scan_options({
            "request_timeout": "7",
            "verify_tls": False,
            "http_proxy": "http://p:8080",
            "https_proxy": "http://p:8443",
            "user_agent": "triage-bot/2.0",
            "geo_api_url": "https://geo.test",
            "dns_nameservers": ["1.1.1.1"],
        })

        assert options == {
            "geo_api_url": "https://geo.test",
            "nameservers": ["1.1.1.1"],
            "request_timeout": 7.0,
            "verify_tls": False,
            "proxies": {"http": "http://p:8080", "https": "http://p:8443"},
            "user_agent": "triage-bot/2.0",
        }

    def test_defaults(self):
        options = scan_options({"request_timeout": "soon"})

        assert options["request_timeout"] == 10.0
        assert options["verify_tls"] is True
        assert options["proxies"] is None


class TestBlacklistFile:
    def test_comments_and_blanks_skipped(self, tmp_path):
        path = tmp_path / "blacklist.txt"
        path.write_text("# feed export\n\n  badactor.net  \nexample-phish.com\n#old.example\n", encoding="utf-8")

        assert load_blacklist_file(str(path)) == ["badactor.net", "example-phish.com"]


class TestLogger:
    def test_log_event(self, tmp_path, monkeypatch):
        monkeypatch.setattr(logger, "EVENT_LOG_FILE", tmp_path / "logs" / "events.jsonl")

        logger.log_event("scan_start", {"targets": ["example.com"]})
        logger.log_event("scan_failed", level="warning")

        lines = (tmp_path / "logs" / "events.jsonl").read_text(encoding="utf-8").splitlines()
        first, second = (json.loads(line) for line in lines)
        assert first["event"] == "scan_start"
        assert first["data"] == {"targets": ["example.com"]}
        assert first["level"] == "info"
        assert second["level"] == "warning"
        assert second["data"] == {}

    def test_log_scan_history_writes_header_once(self, tmp_path, monkeypatch):
        monkeypatch.setattr(logger, "HISTORY_LOG_FILE", tmp_path / "history.csv")
        result = {"target": "http://badactor.net", "score": 45, "classification": "Suspicious",
                  "triggered_rules": ["domain_blacklisted", "uses_http"]}

        logger.log_scan_history([result])
        logger.log_scan_history([result])

        with open(tmp_path / "history.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["timestamp", "target", "score", "classification", "triggered_rules"]
        assert len(rows) == 3
        assert rows[1][1:] == ["http://badactor.net", "45", "Suspicious", "domain_blacklisted;uses_http"]
