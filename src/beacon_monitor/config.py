"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class BackendConfig:
    """Remote service settings."""
    environment: str = "prod"
    prod_url: str = "https://api.beaconblocker.com"
    dev_url: str = "http://localhost:3000"
    timeout: float = 10.0


@dataclass
class DashboardConfig:
    """Our own dashboard, which is never monitored."""
    prod_domains: list[str] = field(default_factory=lambda: [
        "beaconblocker.vercel.app",
        "chrome-test-dashboard.vercel.app",
        "dashboard.beaconblocker.com",
    ])
    dev_domains: list[str] = field(default_factory=lambda: [
        "localhost:5173",
        "localhost:5174",
        "localhost:5175",
        "beaconblocker.vercel.app",
        "chrome-test-dashboard.vercel.app",
        "dashboard.beaconblocker.com",
    ])


@dataclass
class DetectionConfig:
    """Change detection timing."""
    max_attempts: int = 20
    retry_interval: float = 0.5
    verify_delay: float = 0.25


@dataclass
class ExtractionConfig:
    """Page extraction limits."""
    body_text_limit: int = 500
    search_context_ttl: float = 300.0


@dataclass
class HeartbeatConfig:
    """Liveness ping schedule, in seconds."""
    initial_delay: float = 60.0
    period: float = 600.0


@dataclass
class PathsConfig:
    """Path settings."""
    sync_store: Path = Path("state/sync.yaml")
    local_store: Path = Path("state/local.yaml")
    log_dir: Path = Path("logs")


@dataclass
class Settings:
    """Application settings."""

    block_page_url: str = "beacon://blocked.html"
    log_level: str = "INFO"
    backend_url_override: str = ""

    # Config sections
    backend: BackendConfig = field(default_factory=BackendConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    heartbeat: HeartbeatConfig = field(default_factory=HeartbeatConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @property
    def is_dev(self) -> bool:
        return self.backend.environment == "dev"

    @property
    def backend_url(self) -> str:
        if self.backend_url_override:
            return self.backend_url_override
        return self.backend.dev_url if self.is_dev else self.backend.prod_url

    @property
    def dashboard_domains(self) -> list[str]:
        return self.dashboard.dev_domains if self.is_dev else self.dashboard.prod_domains


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings()

    for key in ("block_page_url", "log_level"):
        if key in config:
            setattr(settings, key, config[key])

    # Apply YAML sections
    if "backend" in config:
        for key, value in config["backend"].items():
            setattr(settings.backend, key, value)

    if "dashboard" in config:
        settings.dashboard = DashboardConfig(**config["dashboard"])

    if "detection" in config:
        for key, value in config["detection"].items():
            setattr(settings.detection, key, value)

    if "extraction" in config:
        for key, value in config["extraction"].items():
            setattr(settings.extraction, key, value)

    if "heartbeat" in config:
        for key, value in config["heartbeat"].items():
            setattr(settings.heartbeat, key, value)

    if "paths" in config:
        for key, value in config["paths"].items():
            setattr(settings.paths, key, Path(value))

    # Environment wins over the file
    if os.getenv("BEACON_ENV"):
        settings.backend.environment = os.environ["BEACON_ENV"]
    settings.backend_url_override = os.getenv("BEACON_BACKEND_URL", "")
    if os.getenv("LOG_LEVEL"):
        settings.log_level = os.environ["LOG_LEVEL"]

    return settings
