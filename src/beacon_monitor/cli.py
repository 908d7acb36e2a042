"""CLI entry point for beacon monitor."""

import asyncio
from pathlib import Path
from typing import Optional

import httpx
import typer

from beacon_monitor.adapters.backend import BeaconClient
from beacon_monitor.adapters.browser import AsyncioRepeatingTimer, InMemoryTabs, StaticPage
from beacon_monitor.adapters.storage import YamlFileStore
from beacon_monitor.config import Settings, get_settings
from beacon_monitor.core import CredentialStore, HeartbeatScheduler
from beacon_monitor.logging_setup import configure_logging
from beacon_monitor.use_cases import Coordinator, create_page_monitor

app = typer.Typer(help="Monitor pages and enforce allow/block decisions.")

CHECK_TAB_ID = 1
CONFIG_OPTION = typer.Option(Path("config.yaml"), "--config", help="Path to YAML config")


def _load(config: Path) -> Settings:
    settings = get_settings(config)
    configure_logging(settings.log_level, settings.paths.log_dir)
    return settings


@app.command("set-key")
def set_key(key: str, config: Path = CONFIG_OPTION) -> None:
    """Save the API key (an empty string clears it)."""
    settings = _load(config)

    async def run() -> None:
        credentials = CredentialStore(YamlFileStore(settings.paths.sync_store))
        await credentials.set(key)
        print("✓ API key saved" if credentials.is_active else "✓ API key cleared")

    asyncio.run(run())


@app.command()
def heartbeat(config: Path = CONFIG_OPTION) -> None:
    """Send one liveness ping."""
    settings = _load(config)

    async def run() -> None:
        credentials = CredentialStore(YamlFileStore(settings.paths.sync_store))
        if not await credentials.load():
            print("⚠️  No API key set, heartbeat skipped")
            return
        client = BeaconClient(settings.backend_url, timeout=settings.backend.timeout)
        scheduler = HeartbeatScheduler(credentials, client, AsyncioRepeatingTimer("heartbeat"))
        await scheduler.ping()
        print(f"✓ Heartbeat sent to {settings.backend_url}")

    asyncio.run(run())


@app.command()
def check(
    url: str,
    html: Optional[Path] = typer.Option(None, "--html", help="Read the page from a file instead of fetching it"),
    config: Path = CONFIG_OPTION,
) -> None:
    """Run one page through extraction, classification and enforcement."""
    settings = _load(config)
    asyncio.run(async_check(settings, url, html))


async def _fetch_page(url: str, timeout: float) -> StaticPage:
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            print(f"⚠️  Could not fetch {url}: {e}")
            return StaticPage(url)
    return StaticPage(url, response.text)


async def async_check(settings: Settings, url: str, html: Optional[Path]) -> None:
    """Async implementation of the check command."""
    sync_store = YamlFileStore(settings.paths.sync_store)
    local_store = YamlFileStore(settings.paths.local_store)
    tabs = InMemoryTabs({CHECK_TAB_ID: url})

    coordinator = Coordinator(
        settings=settings,
        backend=BeaconClient(settings.backend_url, timeout=settings.backend.timeout),
        tabs=tabs,
        sync_store=sync_store,
        local_store=local_store,
        timer=AsyncioRepeatingTimer("heartbeat"),
    )
    await coordinator.start(schedule_heartbeat=False)

    print(f"\n🔑 API key: {'set' if coordinator.credentials.is_active else 'not set (requests are suppressed)'}")
    print(f"🌐 Backend: {settings.backend_url}")

    page = StaticPage.from_file(url, html) if html else await _fetch_page(url, settings.backend.timeout)
    monitor = create_page_monitor(settings, page, local_store, coordinator.connect(CHECK_TAB_ID))

    try:
        await monitor.on_load()
        await monitor.wait_idle()
        await coordinator.drain()
    finally:
        monitor.close()
        await coordinator.stop()

    final_url = await tabs.get_url(CHECK_TAB_ID)
    if final_url == settings.block_page_url:
        print(f"⛔ BLOCKED: {url}")
    elif coordinator.enforcer.last_decision is None:
        print(f"• Nothing submitted for {url}")
    else:
        print(f"✅ ALLOWED: {url}")

    session = await coordinator.sessions.current()
    if session:
        print(f"📱 Shorts session active, {session.count} item(s)")


if __name__ == "__main__":
    app()
