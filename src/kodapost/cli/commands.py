"""CLI commands: inspect platforms, publish images, read jobs."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer

from ..config import load_settings
from ..jobs import JobNotFoundError, JsonFileJobStore, describe_job, get_job_for_owner
from ..platforms import PlatformRegistry
from ..publishing import EnvTokenProvider, PublishCoordinator, connection_status
from .console import console, print_error
from .display import show_job, show_platforms_table, show_publish_results, show_sweep_result


def platforms() -> None:
    """List registered platform adapters and their connection status."""
    names = PlatformRegistry.available_platforms()
    connections = asyncio.run(connection_status(EnvTokenProvider(), names))
    show_platforms_table(console, names, connections)


def publish(
    images: List[Path] = typer.Argument(..., help="Slide images, in order"),
    platform: List[str] = typer.Option(
        ..., "--platform", "-p", help="Target platform (repeatable)"
    ),
    caption: str = typer.Option("", "--caption", "-c", help="Post caption"),
) -> None:
    """Publish local images to one or more platforms."""
    for name in platform:
        if not PlatformRegistry.is_registered(name):
            available = ", ".join(PlatformRegistry.available_platforms())
            print_error(f"Unknown platform: {name}", {"available": available})
            raise typer.Exit(1)

    missing = [str(path) for path in images if not path.is_file()]
    if missing:
        print_error("Image file not found", {"files": ", ".join(missing)})
        raise typer.Exit(1)

    settings = load_settings()
    image_bytes = [path.read_bytes() for path in images]
    provider = EnvTokenProvider()
    coordinator = PublishCoordinator(provider, settings=settings)

    async def run():
        connections = await connection_status(provider, platform)
        return await coordinator.publish_selected(platform, connections, image_bytes, caption)

    outcomes = asyncio.run(run())
    show_publish_results(console, outcomes)

    if not outcomes or not all(outcome.success for outcome in outcomes.values()):
        raise typer.Exit(1)


def job(
    job_id: str = typer.Argument(..., help="Job id, e.g. job_a1B2c3D4e5F6"),
    owner: Optional[str] = typer.Option(None, "--owner", help="Only show if owned by this user"),
) -> None:
    """Show a generation job as polling callers see it."""
    settings = load_settings()
    store = JsonFileJobStore(settings.jobs_dir)
    try:
        record = get_job_for_owner(store, job_id, owner) if owner else store.get(job_id)
    except JobNotFoundError:
        print_error(f"Job not found: {job_id}")
        raise typer.Exit(1)

    show_job(console, describe_job(record))


def sweep_jobs() -> None:
    """Delete expired job records."""
    settings = load_settings()
    store = JsonFileJobStore(settings.jobs_dir)
    show_sweep_result(console, store.purge_expired())
