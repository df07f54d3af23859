#!/usr/bin/env python3
"""CLI script for importing the Common Core standards as competency frameworks.

Usage:
    # Dry run against an in-memory store (ancestor pages are still fetched)
    python -m ccss_import.importer.scripts.import_frameworks --scale-id 2 \\
        --scale-configuration '[{"scaleid":"2"},{"id":1,"scaledefault":1,"proficient":1}]' \\
        --dry-run

    # Import into Postgres (DATABASE_URL or HOST/DB_* in .env)
    python -m ccss_import.importer.scripts.import_frameworks --scale-id 2 \\
        --scale-configuration-file scale.json

    # Use documents from another directory, skipping unreachable ancestors
    python -m ccss_import.importer.scripts.import_frameworks --scale-id 2 \\
        --scale-configuration-file scale.json --data-dir /srv/ccss --skip-missing-ancestors
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ccss_import.hierarchy.ancestors import AncestorFailurePolicy
from ccss_import.importer.config import DBConfig, ImportConfig, default_sources
from ccss_import.importer.pipeline import FRAMEWORKS_CREATED, ImportOutcome, import_frameworks
from ccss_import.importer.progress import LoggingProgress
from ccss_import.importer.store import InMemoryStore
from ccss_import.utils.logging_config import setup_logging

# -----------------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Import the Common Core State Standards as competency frameworks.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--scale-id",
        type=int,
        required=True,
        help="Grading scale id attached to every framework",
    )

    config_group = parser.add_mutually_exclusive_group(required=True)
    config_group.add_argument(
        "--scale-configuration",
        help="Scale configuration JSON",
    )
    config_group.add_argument(
        "--scale-configuration-file",
        type=Path,
        help="File containing the scale configuration JSON",
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Directory holding math.xml and ela-literacy.xml (default: CCSS_DATA_DIR)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Import into an in-memory store instead of the database",
    )

    parser.add_argument(
        "--stop-on-failure",
        action="store_true",
        help="Do not import remaining files after a file fails",
    )

    parser.add_argument(
        "--skip-missing-ancestors",
        action="store_true",
        help="Skip ancestors whose page cannot be fetched instead of failing the file",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ImportConfig:
    """Environment config overridden by command-line flags."""
    config = ImportConfig.from_env()
    if args.data_dir:
        config.sources = default_sources(args.data_dir)
    if args.stop_on_failure:
        config.stop_on_file_failure = True
    if args.skip_missing_ancestors:
        config.ancestor_failure_policy = AncestorFailurePolicy.SKIP
    return config


def print_summary(outcome: ImportOutcome) -> None:
    """Print one line per file and the overall result."""
    print("\n📊 Results:")
    for file_result in outcome.files:
        status = "✓" if file_result.success else "❌"
        print(
            f"   {status} {file_result.source}: {file_result.stage.value}, "
            f"{file_result.created_count} competencies, "
            f"{len(file_result.synthesized)} ancestors synthesized"
        )
        if file_result.skipped_ancestors:
            print(f"     ⚠ skipped ancestors: {', '.join(file_result.skipped_ancestors)}")

    print("\n" + "=" * 60)
    if outcome.success:
        print(f"✅ {FRAMEWORKS_CREATED}")
    else:
        print(f"❌ {outcome.error or 'Nothing was imported'}")
    print("=" * 60)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        config = build_config(args)
        if args.scale_configuration_file:
            scale_configuration = args.scale_configuration_file.read_text(encoding="utf-8")
        else:
            scale_configuration = args.scale_configuration
    except (OSError, ValueError) as e:
        print(f"\n❌ Configuration error: {e}")
        return 1

    progress = LoggingProgress()

    if args.dry_run:
        print("\n🔍 DRY RUN MODE - importing into an in-memory store\n")
        outcome = import_frameworks(
            args.scale_id, scale_configuration,
            store=InMemoryStore(), progress=progress, config=config,
        )
    else:
        try:
            from ccss_import.importer.db_client import DBCompetencyStore

            db_config = DBConfig.from_env()
            if args.verbose:
                print(f"   Connecting to {db_config.host}:{db_config.port}/{db_config.database}...")
            with DBCompetencyStore.connect(db_config) as store:
                outcome = import_frameworks(
                    args.scale_id, scale_configuration,
                    store=store, progress=progress, config=config,
                )
        except ValueError as e:
            print(f"\n❌ Configuration error: {e}")
            return 1
        except Exception as e:
            print(f"\n❌ Database error: {e}")
            if args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    print_summary(outcome)
    return 0 if outcome.success else 1


if __name__ == "__main__":
    sys.exit(main())
