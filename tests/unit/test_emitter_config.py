"""Tests for the emitter configuration system."""

import pytest

from nodeify.config import DEFAULT_CONFIG
from nodeify.config import EmitterConfig
from nodeify.config import config_context
from nodeify.config import get_config
from nodeify.config import reset_config
from nodeify.config import set_config
from nodeify.config import update_config
from nodeify.errors import ConfigurationError


class TestEmitterConfig:
    """Test cases for EmitterConfig class."""

    def test_default_config(self) -> None:
        config = EmitterConfig()

        assert config.max_listeners == 50
        assert config.duplicate_subscriptions is False
        assert config.log_level == "INFO"

    def test_from_mapping_accepts_camel_case(self) -> None:
        config = EmitterConfig.from_mapping(
            {"maxListeners": 10, "duplicateSubscriptions": True, "log_level": "DEBUG"}
        )

        assert config.max_listeners == 10
        assert config.duplicate_subscriptions is True
        assert config.log_level == "DEBUG"

    def test_from_mapping_unknown_key(self) -> None:
        with pytest.raises(ConfigurationError) as excinfo:
            EmitterConfig.from_mapping({"maxListener": 10})
        assert excinfo.value.config_key == "maxListener"

    def test_from_mapping_validates(self) -> None:
        with pytest.raises(ConfigurationError, match="max_listeners"):
            EmitterConfig.from_mapping({"max_listeners": -1})

    @pytest.mark.parametrize(
        ("kwargs", "key"),
        [
            ({"max_listeners": -5}, "max_listeners"),
            ({"max_listeners": "many"}, "max_listeners"),
            ({"max_listeners": True}, "max_listeners"),
            ({"duplicate_subscriptions": "yes"}, "duplicate_subscriptions"),
            ({"log_level": "TRACE"}, "log_level"),
        ],
    )
    def test_validate_rejects(self, kwargs, key) -> None:
        config = EmitterConfig(**kwargs)

        with pytest.raises(ConfigurationError) as excinfo:
            config.validate()
        assert excinfo.value.config_key == key

    def test_zero_listeners_is_valid(self) -> None:
        EmitterConfig(max_listeners=0).validate()


class TestConfigManager:
    """Test cases for the process-wide config functions."""

    def test_get_config_defaults(self) -> None:
        assert get_config() is DEFAULT_CONFIG

    def test_set_and_reset(self) -> None:
        custom = EmitterConfig(max_listeners=5)
        set_config(custom)
        assert get_config() is custom

        reset_config()
        assert get_config() is DEFAULT_CONFIG

    def test_set_config_validates(self) -> None:
        with pytest.raises(ConfigurationError):
            set_config(EmitterConfig(max_listeners=-1))
        assert get_config() is DEFAULT_CONFIG

    def test_update_config_leaves_default_untouched(self) -> None:
        update_config(max_listeners=12)

        assert get_config().max_listeners == 12
        assert DEFAULT_CONFIG.max_listeners == 50

    def test_update_config_ignores_unknown_keys(self, caplog) -> None:
        update_config(verbose=True, log_level="DEBUG")

        assert get_config().log_level == "DEBUG"
        assert "Ignoring unknown config key(s): verbose" in caplog.text

    def test_update_config_invalid_value_keeps_previous(self) -> None:
        with pytest.raises(ConfigurationError):
            update_config(max_listeners=-3)
        assert get_config().max_listeners == 50

    def test_config_context_restores(self) -> None:
        with config_context(max_listeners=2, duplicate_subscriptions=True) as config:
            assert config.max_listeners == 2
            assert get_config().duplicate_subscriptions is True

        assert get_config() is DEFAULT_CONFIG

    def test_config_context_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError), config_context(max_listeners=2):
            raise RuntimeError("inside")

        assert get_config().max_listeners == 50
