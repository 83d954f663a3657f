"""Tests for display labels of rules and classifications."""

import pytest

from riskscope.risk_scoring import RULE_IDS, RuleOutcome, score_url_risk
from riskscope.rule_labels import (
    RULE_LABELS,
    format_points,
    get_classification_label,
    get_risk_rule_label,
    sort_breakdown_by_impact,
    title_case_from_id,
)


class TestRuleLabels:
    def test_every_rule_has_a_label(self):
        assert set(RULE_IDS) == set(RULE_LABELS)

    def test_known_rules(self):
        assert get_risk_rule_label("phishing_keywords") == "Phishing keywords"
        assert get_risk_rule_label("uses_http") == "Insecure protocol (HTTP)"
        assert get_risk_rule_label("https_long_domain_bonus") == "HTTPS reputation bonus"

    @pytest.mark.parametrize(
        "rule_id, expected",
        [
            ("new_rule_id", "New Rule Id"),
            ("punycode--host", "Punycode Host"),
            ("__leading_and_trailing__", "Leading And Trailing"),
            ("already", "Already"),
        ],
    )
    def test_unknown_rules_are_title_cased(self, rule_id, expected):
        assert get_risk_rule_label(rule_id) == expected
        assert title_case_from_id(rule_id) == expected


class TestClassificationLabels:
    def test_known(self):
        assert get_classification_label("Safe") == "SAFE"
        assert get_classification_label("Suspicious") == "SUSPICIOUS"
        assert get_classification_label("Dangerous") == "DANGEROUS"

    def test_unknown_is_upper_cased(self):
        assert get_classification_label("unknown") == "UNKNOWN"


class TestBreakdownDisplay:
    def test_format_points(self):
        assert format_points(30) == "+30"
        assert format_points(-20) == "-20"
        assert format_points(0) == "0"

    def test_sort_by_impact_is_stable(self):
        breakdown = score_url_risk("http://203.0.113.5/verify?a=1&b=2&c=3&d=4&e=5").breakdown

        ordered = sort_breakdown_by_impact(breakdown)

        assert [item.rule for item in ordered] == [
            "phishing_keywords",
            "raw_ip_host",
            "uses_http",
            "special_chars_over_4",
        ]

    def test_sort_uses_absolute_points(self):
        breakdown = [
            RuleOutcome("uses_http", 20, "URL uses http"),
            RuleOutcome("https_long_domain_bonus", -20, "HTTPS + hostname length 11"),
            RuleOutcome("phishing_keywords", 30, "Matched keywords: login"),
        ]

        ordered = sort_breakdown_by_impact(breakdown)

        assert [item.rule for item in ordered] == ["phishing_keywords", "uses_http", "https_long_domain_bonus"]

    def test_scoring_order_is_untouched(self):
        result = score_url_risk("http://203.0.113.5/verify?a=1&b=2&c=3&d=4&e=5")
        sort_breakdown_by_impact(result.breakdown)

        assert result.triggered_rules[-1] == "uses_http"
