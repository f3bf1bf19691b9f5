"""
Tests for Settings Loader
=========================
Tests the YAML config lookup in settings.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from settings import (
    APP_CONFIG_PATH,
    CONFIG_ENV_VAR,
    config_path,
    get_setting,
    load_app_config,
    require_setting,
    resolve_path,
)


class TestSettings:
    """Tests for get_setting and friends."""

    def test_config_file_exists(self):
        assert APP_CONFIG_PATH.exists()
        assert isinstance(load_app_config(), dict)

    def test_nested_lookup(self):
        assert isinstance(get_setting("generation.max_attempts_per_title"), int)
        assert get_setting("feed.max_redirects") >= 0

    def test_missing_returns_default(self):
        assert get_setting("feed.no_such_key") is None
        assert get_setting("no.such.path", 42) == 42

    def test_lookup_through_scalar(self):
        assert get_setting("feed.timeout_seconds.deeper", "x") == "x"

    def test_require_setting(self):
        assert require_setting("feed.user_agent")
        with pytest.raises(ValueError, match="must be set in app.yaml"):
            require_setting("feed.no_such_key")

    def test_package_wrapper(self):
        from monkeytitles.settings import get_setting as wrapped

        assert wrapped("cli.show_stats") == get_setting("cli.show_stats")


class TestConfigOverride:
    """Tests for the MONKEYTITLES_CONFIG override."""

    @pytest.fixture(autouse=True)
    def fresh_cache(self):
        load_app_config.cache_clear()
        yield
        load_app_config.cache_clear()

    def test_override_path(self, tmp_path, monkeypatch):
        custom = tmp_path / "custom.yaml"
        custom.write_text("generation:\n  max_attempts_per_title: 7\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))

        assert config_path() == custom
        assert get_setting("generation.max_attempts_per_title") == 7
        assert get_setting("feed.timeout_seconds") is None

    def test_missing_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.yaml"))

        with pytest.raises(FileNotFoundError):
            load_app_config()

    def test_empty_file(self, tmp_path, monkeypatch):
        empty = tmp_path / "empty.yaml"
        empty.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(empty))

        assert load_app_config() == {}

    def test_non_mapping_rejected(self, tmp_path, monkeypatch):
        bad = tmp_path / "list.yaml"
        bad.write_text("- one\n- two\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(bad))

        with pytest.raises(ValueError):
            load_app_config()

    def test_default_without_override(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

        assert config_path() == APP_CONFIG_PATH


class TestResolvePath:
    """Tests for resolve_path()."""

    def test_absolute_unchanged(self, tmp_path):
        assert resolve_path(str(tmp_path)) == tmp_path

    def test_relative_to_base(self, tmp_path):
        assert resolve_path("titles.txt", base=tmp_path) == (tmp_path / "titles.txt").resolve()

    def test_none_rejected(self):
        with pytest.raises(ValueError):
            resolve_path(None)
