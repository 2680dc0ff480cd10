"""
Action catalog: how many growth points an action is worth.

The ingest service depends on the ActionCatalog protocol only,
so the static table below can be swapped for another source.
"""

import json
import logging
from collections.abc import Mapping
from typing import Protocol

from growth_ledger.config import Settings

logger = logging.getLogger(__name__)


# Keys match Gleam's entry.action.
DEFAULT_ACTION_POINTS: dict[str, int] = {
    "subscribe_newsletter": 50,
    "follow_twitter": 10,
    "visit_pricing_page": 5,
}


class ActionCatalog(Protocol):

    def lookup(self, action_key: str) -> int:
        """Points for an action. Unknown actions are worth 0."""
        ...


class StaticActionCatalog:
    """An in-memory action -> points table."""

    def __init__(self, points: Mapping[str, int]):
        for action_key, value in points.items():
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(
                    f"Points for action '{action_key}' must be an integer"
                )
            if value < 0:
                raise ValueError(
                    f"Points for action '{action_key}' must not be negative"
                )
        self._points = dict(points)

    def lookup(self, action_key: str) -> int:
        return self._points.get(action_key, 0)

    def __len__(self) -> int:
        return len(self._points)


def load_action_catalog(settings: Settings) -> StaticActionCatalog:
    """
    Build the catalog from the ACTION_POINTS setting.

    ACTION_POINTS is a JSON object. When it is empty the
    built-in DEFAULT_ACTION_POINTS table is used.
    """
    if not settings.ACTION_POINTS:
        return StaticActionCatalog(DEFAULT_ACTION_POINTS)

    try:
        points = json.loads(settings.ACTION_POINTS)
    except json.JSONDecodeError as e:
        raise ValueError(f"ACTION_POINTS is not valid JSON: {e}") from e

    if not isinstance(points, dict):
        raise ValueError("ACTION_POINTS must be a JSON object")

    catalog = StaticActionCatalog(points)
    logger.info("Loaded %d actions from ACTION_POINTS", len(catalog))
    return catalog
