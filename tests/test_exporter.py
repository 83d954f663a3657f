"""Tests for case exports in JSON, CSV and plain text."""

import csv
import json

from riskscope.exporter import export_data
from riskscope.risk_scoring import score_url_risk


def make_results():
    scored = {"target": "http://secure-login.badactor.net"}
    scored.update(score_url_risk("http://secure-login.badactor.net").to_dict())
    scored.update({"ip": "198.51.100.7", "country": "Germany", "lat": 52.52, "lon": 13.405})

    failed = {"target": "nowhere.invalid", "error": "No A record found"}
    failed.update(score_url_risk("nowhere.invalid").to_dict())
    return [scored, failed]


class TestExportData:
    def test_json(self, tmp_path):
        path = export_data(make_results(), "json", "case", save_dir=tmp_path / "exports")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["score"] == 50
        assert data[0]["breakdown"][0]["rule"] == "phishing_keywords"
        assert data[1]["error"] == "No A record found"

    def test_csv(self, tmp_path):
        path = export_data(make_results(), "csv", "case", save_dir=tmp_path)

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert rows[0]["triggered_rules"] == "phishing_keywords;uses_http"
        assert rows[0]["country"] == "Germany"
        assert rows[1]["error"] == "No A record found"
        assert rows[1]["ip"] == ""

    def test_txt(self, tmp_path):
        path = export_data(make_results(), "txt", "case", save_dir=tmp_path)

        text = path.read_text(encoding="utf-8")
        assert "Target: http://secure-login.badactor.net" in text
        assert "Risk Score: 50 (SUSPICIOUS)" in text
        assert "Hosting: 198.51.100.7 / Germany" in text
        assert "[+30] Phishing keywords: Matched keywords: login, secure" in text
        assert "[-20] HTTPS reputation bonus: HTTPS + hostname length 15" in text
        assert "Error: No A record found" in text

    def test_rejects_non_list(self, tmp_path):
        assert export_data({"target": "x"}, "json", "case", save_dir=tmp_path) is None
        assert not (tmp_path / "case.json").exists()

    def test_rejects_unknown_format(self, tmp_path):
        assert export_data(make_results(), "xml", "case", save_dir=tmp_path) is None
