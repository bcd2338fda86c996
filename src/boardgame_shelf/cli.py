"""
Command-line interface for Board Game Shelf.

Provides commands to build the games document and to regenerate
the manifest from a BGG collection.
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from boardgame_shelf.config import get_settings
from boardgame_shelf.logger import get_logger, setup_logging

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(), indent=2, default=str))


def get_option(argv: list[str], name: str) -> str | None:
    """Value following --name in argv, if any."""
    if name in argv:
        idx = argv.index(name)
        if idx + 1 < len(argv):
            return argv[idx + 1]
    return None


async def cmd_build(manifest: Path | None = None, output: Path | None = None) -> None:
    """Build the games document from the manifest."""
    from boardgame_shelf.ingestion.orchestrator import BuildOrchestrator

    orchestrator = BuildOrchestrator(manifest_path=manifest, output_path=output)
    result = await orchestrator.run()

    print_json(
        CLIOutput(
            success=True,
            command="build",
            data={
                "run_id": str(result.run_id),
                "output_path": str(result.output_path),
                "games_written": result.games_written,
                "missing_ids": result.missing_ids,
                "requests_made": result.requests_made,
                "duration_seconds": round(result.duration_seconds, 2),
            },
        )
    )


async def cmd_sync_collection(
    username: str,
    manifest: Path | None = None,
    keep_overrides: bool = True,
) -> None:
    """Regenerate the manifest from a user's owned games."""
    from boardgame_shelf.ingestion.orchestrator import CollectionSyncOrchestrator

    settings = get_settings()
    if not settings.has_token:
        raise ValueError("Missing BGG_TOKEN environment variable")

    orchestrator = CollectionSyncOrchestrator(manifest_path=manifest)
    result = await orchestrator.run(username, keep_overrides=keep_overrides)

    print_json(
        CLIOutput(
            success=True,
            command="sync-collection",
            data={
                "run_id": str(result.run_id),
                "username": result.username,
                "manifest_path": str(result.manifest_path),
                "games": len(result.ids),
                "preserved_entries": result.preserved_entries,
                "duration_seconds": round(result.duration_seconds, 2),
            },
        )
    )


async def cmd_test_config() -> None:
    """Test configuration loading."""
    settings = get_settings()

    print_json(
        CLIOutput(
            success=True,
            command="test-config",
            data={
                "bgg_base_url": settings.bgg.base_url,
                "token_configured": settings.has_token,
                "chunk_size": settings.fetch.chunk_size,
                "chunk_pause_seconds": settings.fetch.chunk_pause_seconds,
                "manifest_path": str(settings.paths.manifest_path),
                "output_path": str(settings.paths.output_path),
                "log_level": settings.logging.level,
            },
        )
    )


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Board Game Shelf CLI
====================

Usage: boardgame-shelf <command> [arguments]

Commands:
  build                        Fetch BGG data for the manifest and write the games JSON
  sync-collection <username>   Rewrite the manifest from a user's owned games
  test-config                  Test configuration loading

Options:
  --manifest <path>            Manifest file (default: games.yaml)
  --output <path>              Output document for build (default: site/games.json)
  --replace                    sync-collection: drop existing notes and overrides

Environment:
  BGG_TOKEN                    Bearer token, required by sync-collection

Examples:
  boardgame-shelf build --output docs/games.json
  boardgame-shelf sync-collection alice
"""
    print(usage)


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    argv = sys.argv if argv is None else argv

    if len(argv) < 2:
        print_usage()
        sys.exit(1)

    setup_logging()
    command = argv[1]
    manifest_opt = get_option(argv, "--manifest")
    manifest = Path(manifest_opt) if manifest_opt else None

    try:
        if command == "build":
            output_opt = get_option(argv, "--output")
            asyncio.run(cmd_build(manifest, Path(output_opt) if output_opt else None))

        elif command == "sync-collection":
            if len(argv) < 3 or argv[2].startswith("--"):
                print("Error: username required")
                sys.exit(1)
            asyncio.run(
                cmd_sync_collection(
                    argv[2],
                    manifest,
                    keep_overrides="--replace" not in argv,
                )
            )

        elif command == "test-config":
            asyncio.run(cmd_test_config())

        elif command in ("help", "--help", "-h"):
            print_usage()

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        print_json(
            CLIOutput(
                success=False,
                command=command,
                error=str(e),
            )
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
