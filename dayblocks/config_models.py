from __future__ import annotations

import logging
from functools import lru_cache

import yaml
from pydantic import BaseModel, ConfigDict, Field

from dayblocks import ARGS_DIR

logger = logging.getLogger(__name__)


# =============================================================================
# SchedulingConfig (args/scheduling.yaml)
# =============================================================================

class NotificationsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    default_buffer_minutes: int = Field(default=5, ge=0)
    lookahead_minutes: int = Field(default=15, ge=1)


class TravelConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    default_prep_buffer_minutes: int = Field(default=10, ge=0)
    traffic_buffers: dict[str, int] = Field(
        default_factory=lambda: {"light": 5, "moderate": 10, "heavy": 15}
    )
    cache_ttl_hours: int = Field(default=24, ge=1)
    default_travel_time_minutes: int = Field(default=30, ge=0)


class PreviewConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_blocks: int = Field(default=5, ge=1)
    max_title_length: int = Field(default=100, ge=1)


class GoalsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    on_track_grace_points: int = Field(default=10, ge=0)
    behind_threshold_percent: int = Field(default=50, ge=0, le=100)
    behind_from_day_index: int = Field(default=4, ge=0, le=6)
    agent_goal_limit: int = Field(default=10, ge=1)


class SlotsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_results: int = Field(default=5, ge=1)


class RolloverConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    postponement_window_days: int = Field(default=30, ge=1)
    pattern_scan_limit: int = Field(default=200, ge=1)
    min_pattern_postponements: int = Field(default=3, ge=1)


class SchedulingConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    travel: TravelConfig = Field(default_factory=TravelConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    goals: GoalsConfig = Field(default_factory=GoalsConfig)
    slots: SlotsConfig = Field(default_factory=SlotsConfig)
    rollover: RolloverConfig = Field(default_factory=RolloverConfig)


# =============================================================================
# Loader
# =============================================================================

_CONFIG_MAP: dict[str, type[BaseModel]] = {
    "scheduling": SchedulingConfig,
}


def load_and_validate(config_name: str, model_class: type[BaseModel] | None = None) -> BaseModel:
    if model_class is None:
        model_class = _CONFIG_MAP.get(config_name)
        if model_class is None:
            raise ValueError(f"Unknown config: {config_name}. Available: {list(_CONFIG_MAP.keys())}")

    yaml_path = ARGS_DIR / f"{config_name}.yaml"

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return model_class.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {config_name}: {e}, using defaults")
        return model_class()


@lru_cache(maxsize=1)
def get_config() -> SchedulingConfig:
    """Scheduling config, loaded once per process."""
    return load_and_validate("scheduling")


def reset_config_cache() -> None:
    get_config.cache_clear()


__all__ = [
    "NotificationsConfig",
    "TravelConfig",
    "PreviewConfig",
    "GoalsConfig",
    "SlotsConfig",
    "RolloverConfig",
    "SchedulingConfig",
    "load_and_validate",
    "get_config",
    "reset_config_cache",
]
