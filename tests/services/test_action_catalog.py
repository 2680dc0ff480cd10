"""
Tests for the action catalog.
"""

import pytest

from growth_ledger.config import Settings
from growth_ledger.services.action_catalog import (
    DEFAULT_ACTION_POINTS,
    StaticActionCatalog,
    load_action_catalog,
)


class TestStaticActionCatalog:

    def test_known_action_returns_points(self, catalog):
        assert catalog.lookup("subscribe_newsletter") == 50

    def test_unknown_action_is_worth_zero(self, catalog):
        assert catalog.lookup("no_such_action") == 0

    def test_negative_points_rejected(self):
        with pytest.raises(ValueError, match="must not be negative"):
            StaticActionCatalog({"bad": -5})

    def test_non_integer_points_rejected(self):
        with pytest.raises(ValueError, match="must be an integer"):
            StaticActionCatalog({"bad": "50"})

    def test_boolean_points_rejected(self):
        with pytest.raises(ValueError, match="must be an integer"):
            StaticActionCatalog({"bad": True})


class TestLoadActionCatalog:

    def test_defaults_when_unset(self):
        settings = Settings()
        settings.ACTION_POINTS = ""

        catalog = load_action_catalog(settings)

        for action_key, points in DEFAULT_ACTION_POINTS.items():
            assert catalog.lookup(action_key) == points

    def test_reads_json_mapping(self):
        settings = Settings()
        settings.ACTION_POINTS = '{"share_post": 25}'

        catalog = load_action_catalog(settings)

        assert catalog.lookup("share_post") == 25
        assert catalog.lookup("subscribe_newsletter") == 0

    def test_invalid_json_rejected(self):
        settings = Settings()
        settings.ACTION_POINTS = "{not json"

        with pytest.raises(ValueError, match="not valid JSON"):
            load_action_catalog(settings)

    def test_non_object_rejected(self):
        settings = Settings()
        settings.ACTION_POINTS = "[1, 2]"

        with pytest.raises(ValueError, match="JSON object"):
            load_action_catalog(settings)
