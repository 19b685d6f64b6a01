"""Tests for dayblocks/config_models.py"""

from unittest.mock import patch

import pytest

from dayblocks.config_models import (
    GoalsConfig,
    SchedulingConfig,
    get_config,
    load_and_validate,
    reset_config_cache,
)


class TestSchedulingConfig:
    def test_defaults(self):
        config = SchedulingConfig()
        assert config.notifications.default_buffer_minutes == 5
        assert config.notifications.lookahead_minutes == 15
        assert config.travel.default_prep_buffer_minutes == 10
        assert config.travel.traffic_buffers == {"light": 5, "moderate": 10, "heavy": 15}
        assert config.preview.max_blocks == 5
        assert config.preview.max_title_length == 100
        assert config.goals.on_track_grace_points == 10
        assert config.slots.max_results == 5
        assert config.rollover.postponement_window_days == 30

    def test_valid_overrides(self):
        config = SchedulingConfig(
            notifications={"default_buffer_minutes": 10},
            preview={"max_blocks": 3},
        )
        assert config.notifications.default_buffer_minutes == 10
        assert config.preview.max_blocks == 3
        assert config.preview.max_title_length == 100

    def test_extra_keys_allowed(self):
        config = SchedulingConfig(slots={"max_results": 2, "unknown_field": "value"})
        assert config.slots.max_results == 2

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValueError):
            SchedulingConfig(notifications={"default_buffer_minutes": -1})


class TestGoalsConfig:
    def test_behind_day_index_bounded(self):
        with pytest.raises(ValueError):
            GoalsConfig(behind_from_day_index=7)


class TestLoadAndValidate:
    def test_unknown_config_raises(self):
        with pytest.raises(ValueError, match="Unknown config"):
            load_and_validate("nonexistent_config")

    def test_missing_file_returns_defaults(self, tmp_path):
        with patch("dayblocks.config_models.ARGS_DIR", tmp_path):
            config = load_and_validate("scheduling")
            assert isinstance(config, SchedulingConfig)
            assert config.notifications.default_buffer_minutes == 5

    def test_valid_yaml_loads(self, tmp_path):
        yaml_file = tmp_path / "scheduling.yaml"
        yaml_file.write_text("notifications:\n  default_buffer_minutes: 7\n")
        with patch("dayblocks.config_models.ARGS_DIR", tmp_path):
            config = load_and_validate("scheduling")
            assert config.notifications.default_buffer_minutes == 7

    def test_invalid_yaml_returns_defaults(self, tmp_path):
        yaml_file = tmp_path / "scheduling.yaml"
        yaml_file.write_text("preview:\n  max_blocks: 0\n")
        with patch("dayblocks.config_models.ARGS_DIR", tmp_path):
            config = load_and_validate("scheduling")
            assert config.preview.max_blocks == 5

    def test_empty_yaml_returns_defaults(self, tmp_path):
        yaml_file = tmp_path / "scheduling.yaml"
        yaml_file.write_text("")
        with patch("dayblocks.config_models.ARGS_DIR", tmp_path):
            config = load_and_validate("scheduling")
            assert isinstance(config, SchedulingConfig)


class TestGetConfig:
    def test_cached_until_reset(self, tmp_path):
        yaml_file = tmp_path / "scheduling.yaml"
        yaml_file.write_text("slots:\n  max_results: 2\n")
        with patch("dayblocks.config_models.ARGS_DIR", tmp_path):
            reset_config_cache()
            first = get_config()
            yaml_file.write_text("slots:\n  max_results: 4\n")
            assert get_config() is first
            assert get_config().slots.max_results == 2

            reset_config_cache()
            assert get_config().slots.max_results == 4

    def test_shipped_config_matches_defaults(self):
        """args/scheduling.yaml carries the same values as the model defaults."""
        assert get_config().model_dump() == SchedulingConfig().model_dump()
