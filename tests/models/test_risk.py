"""
Unit tests for risk classification and alert policy
"""

from datetime import date

import pytest

from salinity_monitor.models.readings import AlertSeverity, RiskTier
from salinity_monitor.models.risk import AlertPolicy, RiskClassifier


@pytest.fixture
def classifier():
    return RiskClassifier()


@pytest.fixture
def policy():
    return AlertPolicy()


class TestRiskClassifier:
    """Test risk tier thresholds"""

    @pytest.mark.parametrize("salinity,expected", [
        (0.5, RiskTier.LOW),
        (1.99, RiskTier.LOW),
        (2.00, RiskTier.MODERATE),
        (3.99, RiskTier.MODERATE),
        (4.00, RiskTier.HIGH),
        (7.99, RiskTier.HIGH),
        (8.00, RiskTier.CRITICAL),
    ])
    def test_boundaries_are_inclusive_on_lower_bound(self, classifier, salinity, expected):
        assert classifier.classify(salinity) == expected

    def test_tiers_are_monotonic(self, classifier):
        order = [RiskTier.LOW, RiskTier.MODERATE, RiskTier.HIGH, RiskTier.CRITICAL]
        values = [0.5 + step * 0.05 for step in range(151)]
        ranks = [order.index(classifier.classify(v)) for v in values]
        assert ranks == sorted(ranks)

    def test_tier_values(self):
        assert [tier.value for tier in RiskTier] == ["low", "moderate", "high", "critical"]


class TestAlertPolicy:
    """Test alert triggering and content"""

    def test_critical_alert(self, policy, test_location):
        alert = policy.evaluate(test_location, 8.5)

        assert alert is not None
        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.message == "CRITICAL: Soil salinity at 8.50 dS/m in Test Field"
        assert "leaching" in alert.recommendation
        assert alert.alert_type == "high_risk"

    def test_warning_alert(self, policy, test_location):
        alert = policy.evaluate(test_location, 5)

        assert alert is not None
        assert alert.severity == AlertSeverity.WARNING
        assert alert.message == "HIGH RISK: Soil salinity at 5.00 dS/m in Test Field"
        assert "irrigation" in alert.recommendation
        assert "drainage" in alert.recommendation

    def test_no_alert_below_warning_threshold(self, policy, test_location):
        assert policy.evaluate(test_location, 3.9) is None

    @pytest.mark.parametrize("salinity,expected", [
        (3.99, None),
        (4.0, AlertSeverity.WARNING),
        (7.99, AlertSeverity.WARNING),
        (8.0, AlertSeverity.CRITICAL),
    ])
    def test_threshold_boundaries(self, policy, test_location, salinity, expected):
        alert = policy.evaluate(test_location, salinity)
        severity = alert.severity if alert else None
        assert severity == expected

    def test_alert_date_override(self, policy, test_location):
        alert = policy.evaluate(test_location, 6.0, alert_date=date(2025, 6, 1))
        assert alert.alert_date == date(2025, 6, 1)

    def test_repeated_evaluation_is_not_deduplicated(self, policy, test_location):
        first = policy.evaluate(test_location, 9.0)
        second = policy.evaluate(test_location, 9.0)
        assert first is not None and second is not None
        assert first is not second

    def test_alert_record(self, policy, test_location):
        record = policy.evaluate(test_location, 4.25, alert_date=date(2025, 6, 1)).to_record()

        assert record == {
            "location_id": "Test Field",
            "alert_type": "high_risk",
            "severity": "warning",
            "message": "HIGH RISK: Soil salinity at 4.25 dS/m in Test Field",
            "recommendation": AlertPolicy.WARNING_RECOMMENDATION,
            "alert_date": "2025-06-01"
        }
