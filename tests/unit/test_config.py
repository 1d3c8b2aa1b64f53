"""Tests for thresholds and the insights configuration file."""

import json
import math
from pathlib import Path

import pytest

from biblioinsights.trends import InsightsConfig, InsightThresholds, Period, load_insights_config
from biblioinsights.trends.config import sanitize_config_document


@pytest.mark.unit
class TestInsightThresholds:
    """Tests for leaf-by-leaf threshold merging."""

    def test_defaults(self) -> None:
        """Test built-in defaults."""
        thresholds = InsightThresholds()

        assert thresholds.strong_surge.pubs == 2.0
        assert thresholds.strong_surge.cites == 2.0
        assert thresholds.growing_priority.pubs == 1.5
        assert thresholds.growing_priority.cites == 1.2
        assert thresholds.impact_led.cites == 1.5
        assert thresholds.impact_led.pubs_max == 1.0
        assert thresholds.output_softening.pubs == 1.2
        assert thresholds.output_softening.cites_max == 0.9
        assert thresholds.decline_drop == 0.8

    def test_partial_override_keeps_sibling_defaults(self) -> None:
        """Test overriding one leaf leaves the rest of its group alone."""
        thresholds = InsightThresholds.from_dict({"strongSurge": {"pubs": 3}})

        assert thresholds.strong_surge.pubs == 3.0
        assert thresholds.strong_surge.cites == 2.0
        assert thresholds.impact_led == InsightThresholds().impact_led

    @pytest.mark.parametrize("bad", ["two", True, None, -1, math.nan, [2]])
    def test_invalid_leaf_falls_back(self, bad: object) -> None:
        """Test unusable leaf values use the default for that leaf only."""
        thresholds = InsightThresholds.from_dict(
            {"impactLed": {"cites": bad, "pubsMax": 0.5}, "declineDrop": bad}
        )

        assert thresholds.impact_led.cites == 1.5
        assert thresholds.impact_led.pubs_max == 0.5
        assert thresholds.decline_drop == 0.8

    def test_integer_beyond_float_range_falls_back(self) -> None:
        """Test an integer too large for a float uses the default."""
        thresholds = InsightThresholds.from_dict(
            {"declineDrop": 10**400, "strongSurge": {"pubs": 3}}
        )

        assert thresholds.decline_drop == 0.8
        assert thresholds.strong_surge.pubs == 3.0

    def test_non_mapping_group(self) -> None:
        """Test a group that is not an object falls back wholesale."""
        thresholds = InsightThresholds.from_dict({"outputSoftening": 5})

        assert thresholds.output_softening == InsightThresholds().output_softening

    def test_to_dict_round_trip(self) -> None:
        """Test serialized thresholds load back unchanged."""
        thresholds = InsightThresholds.from_dict({"declineDrop": 0.5})

        assert InsightThresholds.from_dict(thresholds.to_dict()) == thresholds


@pytest.mark.unit
class TestSanitizeConfigDocument:
    """Tests for schema validation and pruning."""

    def test_valid_document_untouched(self) -> None:
        """Test a valid document produces no warnings."""
        document = {
            "insightThresholds": {"strongSurge": {"pubs": 2.5}},
            "insightsDefaultPeriodA": {"from": 2010, "to": 2014},
        }

        cleaned, warnings = sanitize_config_document(json.loads(json.dumps(document)))

        assert cleaned == document
        assert warnings == []

    def test_invalid_leaf_pruned(self) -> None:
        """Test a bad leaf is removed and reported with its path."""
        cleaned, warnings = sanitize_config_document(
            {"insightThresholds": {"growingPriority": {"pubs": True, "cites": 1.1}}}
        )

        assert cleaned == {"insightThresholds": {"growingPriority": {"cites": 1.1}}}
        assert len(warnings) == 1
        assert warnings[0].startswith("insightThresholds.growingPriority.pubs")

    def test_invalid_group_pruned(self) -> None:
        """Test a group of the wrong type is removed as a whole."""
        cleaned, warnings = sanitize_config_document({"insightThresholds": "bad"})

        assert cleaned == {}
        assert warnings[0].startswith("insightThresholds:")

    def test_negative_ratio_pruned(self) -> None:
        """Test negative thresholds are rejected."""
        cleaned, warnings = sanitize_config_document({"insightThresholds": {"declineDrop": -1}})

        assert cleaned == {"insightThresholds": {}}
        assert len(warnings) == 1

    def test_non_integer_year_pruned(self) -> None:
        """Test a string year is dropped so the bound stays open."""
        cleaned, _ = sanitize_config_document(
            {"insightsDefaultPeriodA": {"from": "2010", "to": 2014}}
        )

        assert InsightsConfig.from_dict(cleaned).default_period_a == Period(None, 2014)

    def test_root_must_be_object(self) -> None:
        """Test a non-object document is replaced by defaults."""
        cleaned, warnings = sanitize_config_document([1, 2])

        assert cleaned == {}
        assert len(warnings) == 1


@pytest.mark.unit
class TestLoadInsightsConfig:
    """Tests for loading configuration files."""

    def test_no_path_uses_defaults(self) -> None:
        """Test None means defaults without warnings."""
        assert load_insights_config(None) == (InsightsConfig(), [])

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file degrades to defaults with a warning."""
        config, warnings = load_insights_config(tmp_path / "nope.json")

        assert config == InsightsConfig()
        assert "not found" in warnings[0]

    def test_malformed_json(self, tmp_path: Path) -> None:
        """Test malformed JSON degrades to defaults with a warning."""
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        config, warnings = load_insights_config(path)

        assert config == InsightsConfig()
        assert "invalid JSON" in warnings[0]

    def test_huge_integer_leaf_does_not_fail(self, tmp_path: Path) -> None:
        """Test a numeric literal beyond float range degrades to the default."""
        path = tmp_path / "config.json"
        path.write_text(
            '{"insightThresholds": {"declineDrop": 1' + "0" * 400 + "}}",
            encoding="utf-8",
        )

        config, _ = load_insights_config(path)

        assert config.thresholds.decline_drop == 0.8

    def test_fixture(self, fixtures_dir: Path) -> None:
        """Test the sample configuration with one invalid leaf."""
        config, warnings = load_insights_config(fixtures_dir / "insightsconfig.json")

        assert config.thresholds.strong_surge.pubs == 2.0
        assert config.thresholds.strong_surge.cites == 2.0
        assert config.thresholds.impact_led.cites == 1.5
        assert config.default_period_a == Period(2010, 2014)
        assert config.default_period_b == Period(2015, 2019)
        assert len(warnings) == 1
        assert "insightThresholds.strongSurge.pubs" in warnings[0]

    def test_to_dict_uses_file_keys(self) -> None:
        """Test serialization uses the configuration file's keys."""
        data = InsightsConfig(default_period_b=Period(2015, None)).to_dict()

        assert set(data) == {
            "insightThresholds",
            "insightsDefaultPeriodA",
            "insightsDefaultPeriodB",
        }
        assert data["insightsDefaultPeriodB"] == {"from": 2015, "to": None}
