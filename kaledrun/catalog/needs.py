"""
Need configuration - static unlock thresholds and building ratios.

Each need unlocks once the farmer population reaches its threshold, and
requires one more building for every `population_per_building` farmers
above that threshold.
"""

from __future__ import annotations
from dataclasses import dataclass

from .schema import NEED_KEYS


@dataclass(frozen=True)
class NeedDefinition:
    """Static configuration for one need type."""
    need: str
    request_id: str
    unlock_threshold: int
    population_per_building: int
    info_request_id: str
    unlock_token: str | None = None


NEED_DEFINITIONS: tuple[NeedDefinition, ...] = (
    NeedDefinition(
        need="marketplace",
        request_id="NEED_MARKETPLACE",
        unlock_threshold=30,
        population_per_building=100,
        info_request_id="INFO_NEED_MARKETPLACE",
        unlock_token="need:marketplace",
    ),
    NeedDefinition(
        need="bread",
        request_id="NEED_BREAD",
        unlock_threshold=60,
        population_per_building=120,
        info_request_id="INFO_NEED_BREAD",
    ),
    NeedDefinition(
        need="beer",
        request_id="NEED_BEER",
        unlock_threshold=100,
        population_per_building=150,
        info_request_id="INFO_NEED_BEER",
        unlock_token="need:beer",
    ),
    NeedDefinition(
        need="firewood",
        request_id="NEED_FIREWOOD",
        unlock_threshold=170,
        population_per_building=180,
        info_request_id="INFO_NEED_FIREWOOD",
    ),
    NeedDefinition(
        need="well",
        request_id="NEED_WELL",
        unlock_threshold=250,
        population_per_building=200,
        info_request_id="INFO_NEED_WELL",
    ),
)
