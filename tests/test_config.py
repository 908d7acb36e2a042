"""Tests for configuration loading."""

from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from beacon_monitor.config import Settings, get_settings


def test_defaults() -> None:
    """Test built-in defaults."""
    settings = Settings()

    assert settings.backend_url == "https://api.beaconblocker.com"
    assert settings.detection.max_attempts == 20
    assert settings.detection.retry_interval == 0.5
    assert settings.detection.verify_delay == 0.25
    assert settings.extraction.search_context_ttl == 300.0
    assert settings.heartbeat.initial_delay == 60.0
    assert settings.heartbeat.period == 600.0
    assert "dashboard.beaconblocker.com" in settings.dashboard_domains


def test_yaml_overrides() -> None:
    """Test YAML sections are applied onto defaults."""
    with TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "config.yaml"
        config_path.write_text(
            "backend:\n"
            "  environment: dev\n"
            "detection:\n"
            "  max_attempts: 5\n"
            "paths:\n"
            "  local_store: /var/lib/beacon/local.yaml\n"
            "block_page_url: beacon://custom-block.html\n",
            encoding="utf-8",
        )

        with patch.dict("os.environ", {}, clear=True):
            settings = get_settings(config_path)

    assert settings.is_dev
    assert settings.backend_url == "http://localhost:3000"
    assert "localhost:5173" in settings.dashboard_domains
    assert settings.detection.max_attempts == 5
    assert settings.detection.retry_interval == 0.5
    assert settings.paths.local_store == Path("/var/lib/beacon/local.yaml")
    assert settings.block_page_url == "beacon://custom-block.html"


def test_environment_overrides() -> None:
    """Test environment variables win over the file."""
    env = {"BEACON_BACKEND_URL": "https://staging.example.com", "LOG_LEVEL": "DEBUG"}

    with patch.dict("os.environ", env, clear=True):
        settings = get_settings(Path("does-not-exist.yaml"))

    assert settings.backend_url == "https://staging.example.com"
    assert settings.log_level == "DEBUG"


def test_environment_selects_dev_backend() -> None:
    """Test BEACON_ENV switches the backend."""
    with patch.dict("os.environ", {"BEACON_ENV": "dev"}, clear=True):
        settings = get_settings(Path("does-not-exist.yaml"))

    assert settings.backend_url == "http://localhost:3000"
