"""CLI entry point for topic feed aggregation."""

import asyncio
import sys
from collections import Counter
from pathlib import Path
from typing import Optional

import typer

from topic_feeds.adapters.sources import RSSFeedFetcher
from topic_feeds.adapters.storage import JsonSnapshotWriter, fallback_snapshot
from topic_feeds.config import Settings, get_settings, load_topics
from topic_feeds.core import FeedFetcher, Snapshot
from topic_feeds.use_cases import AggregationService, CollectionService, RunService, utc_now


def main(
    config: Path = typer.Option(Path("config.yaml"), "--config", help="Settings file (YAML)"),
    feeds: Optional[Path] = typer.Option(None, "--feeds", help="Topic configuration (JSON or YAML)"),
    output: Optional[Path] = typer.Option(None, "--output", help="Snapshot file to write"),
) -> None:
    """Fetch all topic feeds and write a consolidated snapshot."""
    try:
        settings = get_settings(config)
    except Exception as e:
        # No usable settings: the snapshot still goes to the requested or default path
        fallback_path = output or Settings().output_file
        print(f"❌ Invalid settings: {e}", file=sys.stderr)
        try:
            JsonSnapshotWriter(fallback_path).write(fallback_snapshot(e, utc_now()))
        except Exception as write_error:
            print(f"⚠️  Could not write fallback snapshot: {write_error}", file=sys.stderr)
        else:
            print(f"   Fallback snapshot written to {fallback_path}", file=sys.stderr)
        raise typer.Exit(code=1)

    if feeds is not None:
        settings.paths.feeds_file = feeds
    if output is not None:
        settings.paths.output_file = output

    service = build_service(settings)

    try:
        snapshot = asyncio.run(service.run())
    except Exception as e:
        print(f"❌ Run failed: {e}", file=sys.stderr)
        if service.fallback_written:
            print(f"   Fallback snapshot written to {settings.output_file}", file=sys.stderr)
        raise typer.Exit(code=1)

    print_summary(snapshot)


def app() -> None:
    """CLI entry point."""
    typer.run(main)


def build_service(settings: Settings, fetcher: Optional[FeedFetcher] = None) -> RunService:
    """Wire adapters and services from settings."""
    if fetcher is None:
        fetcher = RSSFeedFetcher(
            timeout=settings.fetch.timeout,
            user_agent=settings.fetch.user_agent,
        )

    return RunService(
        load_topics=lambda: load_topics(settings.feeds_file),
        collection=CollectionService(
            fetcher=fetcher,
            fetch_timeout=settings.fetch.timeout,
            max_concurrency=settings.fetch.max_concurrency,
            untitled_placeholder=settings.pipeline.untitled_placeholder,
        ),
        aggregation=AggregationService(keep_hours=settings.keep_hours),
        writer=JsonSnapshotWriter(settings.output_file),
    )


def print_summary(snapshot: Snapshot) -> None:
    print(f"OK: {len(snapshot.items)} items (failures: {len(snapshot.failures)})")

    if snapshot.failures:
        by_kind = Counter(failure.error.kind for failure in snapshot.failures)
        for kind, count in sorted(by_kind.items()):
            print(f"  • {kind}: {count}")


if __name__ == "__main__":
    app()
