"""
Tool: Travel Buffers
Purpose: Turn cached travel times into the lead time a reminder needs

Travel lookups themselves (geocoding, routing) happen elsewhere; this module
only reads cache entries that a routing service already produced.

Buffer policy for a block that requires travel:
- Fresh cache entry (younger than travel.cache_ttl_hours): the cached travel
  minutes plus a traffic buffer (light 5, moderate 10, heavy 15)
- No usable entry: no travel estimate, flat prep buffer of 10 minutes

Usage:
    from dayblocks.blocks.travel import resolve_travel_buffer

    travel, prep = resolve_travel_buffer(True, entry, clock=clock)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from dayblocks.clock import Clock, resolve_clock
from dayblocks.config_models import get_config
from dayblocks.utils.timezones import parse_instant

logger = logging.getLogger(__name__)

TRAFFIC_CONDITIONS = ("light", "moderate", "heavy")


@dataclass(frozen=True)
class TravelTimeEntry:
    from_location_id: str
    to_location_id: str
    travel_time_minutes: int
    traffic_condition: Optional[str] = None   # light | moderate | heavy
    calculated_at: Optional[datetime] = None

    def is_fresh(self, clock: Clock | None = None) -> bool:
        if self.calculated_at is None:
            return False
        ttl = timedelta(hours=get_config().travel.cache_ttl_hours)
        return resolve_clock(clock).now() - self.calculated_at < ttl

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TravelTimeEntry":
        return cls(
            from_location_id=data["from_location_id"],
            to_location_id=data["to_location_id"],
            travel_time_minutes=int(data["travel_time_minutes"]),
            traffic_condition=data.get("traffic_condition"),
            calculated_at=parse_instant(data.get("calculated_at")),
        )


def traffic_prep_buffer(condition: str | None) -> int:
    """Extra minutes to allow for traffic; unknown conditions count as light."""
    buffers = get_config().travel.traffic_buffers
    if condition in ("heavy", "moderate"):
        return buffers.get(condition, buffers.get("light", 5))
    return buffers.get("light", 5)


def resolve_travel_buffer(
    requires_travel: bool,
    cached_entry: TravelTimeEntry | None = None,
    clock: Clock | None = None,
) -> tuple[int | None, int]:
    """
    Work out (estimated_travel_time, prep_buffer) for a new block.

    Returns:
        (None, 0) when no travel is needed
        (travel minutes, traffic buffer) with a fresh cache entry
        (None, default prep buffer) otherwise
    """
    if not requires_travel:
        return None, 0

    if cached_entry is not None and cached_entry.is_fresh(clock):
        return cached_entry.travel_time_minutes, traffic_prep_buffer(cached_entry.traffic_condition)

    logger.debug("No fresh travel estimate, using default prep buffer")
    return None, get_config().travel.default_prep_buffer_minutes


def build_travel_time_map(entries: Iterable[TravelTimeEntry]) -> dict[str, dict[str, int]]:
    """Nested {from_id: {to_id: minutes}} map; later entries win."""
    travel_map: dict[str, dict[str, int]] = {}
    for entry in entries:
        travel_map.setdefault(entry.from_location_id, {})[entry.to_location_id] = entry.travel_time_minutes
    return travel_map


def get_travel_time(travel_map: dict[str, dict[str, int]], from_id: str, to_id: str) -> int:
    """Cached minutes between two locations, or the configured default."""
    minutes = travel_map.get(from_id, {}).get(to_id)
    if minutes is None:
        return get_config().travel.default_travel_time_minutes
    return minutes


def filter_travel_times_for_locations(
    entries: Iterable[TravelTimeEntry], location_ids: set[str]
) -> list[TravelTimeEntry]:
    """Entries whose endpoints are both in ``location_ids``."""
    return [
        e for e in entries
        if e.from_location_id in location_ids and e.to_location_id in location_ids
    ]


def prune_expired(entries: Iterable[TravelTimeEntry], clock: Clock | None = None) -> list[TravelTimeEntry]:
    """Drop entries older than the cache TTL."""
    return [e for e in entries if e.is_fresh(clock)]


__all__ = [
    "TRAFFIC_CONDITIONS",
    "TravelTimeEntry",
    "traffic_prep_buffer",
    "resolve_travel_buffer",
    "build_travel_time_map",
    "get_travel_time",
    "filter_travel_times_for_locations",
    "prune_expired",
]
