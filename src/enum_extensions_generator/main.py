"""Main entry point for the enum extensions generator."""

import argparse
import hashlib
import sys
from pathlib import Path
from typing import NoReturn

from .application.generators import EnumGenerator
from .domain.models import OutputUnit
from .domain.repositories.cache import PersistentDescriptionCache
from .domain.services.generation import MARKER_MODULE_PATH, MARKER_MODULE_SOURCE
from .infrastructure.config import Config, get_cache_file_path, get_config
from .infrastructure.logging import LoggerSetup, get_logger, log_timing
from .utils.path_utils import collect_source_files, output_path_for


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate fast extension helpers for enums decorated with "
        "@EnumExtensions",
        epilog="""
Examples:
  # Generate helpers for every opted-in enum below src/
  enum-extensions-generator src -o generated/

  # Verbose mode with debug logs
  enum-extensions-generator src -o generated/ --verbose

  # Regenerate everything, ignoring the on-disk cache
  enum-extensions-generator src -o generated/ --no-cache

  # Fail (exit 1) if generated files are missing or stale, write nothing
  enum-extensions-generator src -o generated/ --check

  # Using .env file for configuration
  echo 'ENUMGEN_SOURCE_ROOT=src' > .env
  enum-extensions-generator
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "source_root",
        type=Path,
        nargs="?",
        help="Root directory of the analysed sources (optional if using .env)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output directory for generated modules (default: ./generated)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Enable verbose output with debug logs",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Also write a timestamped debug log file to this directory",
    )
    parser.add_argument(
        "--no-cache",
        action="store_false",
        dest="use_cache",
        default=None,
        help="Ignore and do not update the persistent description cache",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit with status 1 if any output is missing or stale",
    )
    return parser.parse_args(argv)


def _digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def _expected_files(output_dir: Path, outputs: list[OutputUnit]) -> dict[Path, OutputUnit | None]:
    """Every file the run should leave in the output directory (None: marker module)."""
    expected: dict[Path, OutputUnit | None] = {output_dir / MARKER_MODULE_PATH: None}
    for unit in outputs:
        expected[output_path_for(output_dir, unit.namespace, unit.hint_name)] = unit
    return expected


def check_outputs(output_dir: Path, outputs: list[OutputUnit]) -> list[Path]:
    """Files that are missing or differ from what a run would write.

    Args:
        output_dir: Output directory
        outputs: Units produced by the pass

    Returns:
        Stale paths, empty when the output directory is up to date
    """
    stale = []
    for path, unit in _expected_files(output_dir, outputs).items():
        text = MARKER_MODULE_SOURCE if unit is None else unit.text
        if _read_text(path) != text:
            stale.append(path)
    return stale


def write_outputs(
    output_dir: Path,
    outputs: list[OutputUnit],
    cache: PersistentDescriptionCache | None = None,
) -> tuple[int, int, int]:
    """Write generated modules, skipping files that are already current.

    With a persistent cache, a file is current when its record and on-disk
    digest match the cached entry. Files left behind by declarations that no
    longer produce output, or whose output name or namespace changed, are
    removed.

    Args:
        output_dir: Output directory
        outputs: Units produced by the pass
        cache: Persistent description cache, or None to compare file contents

    Returns:
        Counts of (written, unchanged, removed) files
    """
    logger = get_logger(__name__)
    written = unchanged = 0
    expected = _expected_files(output_dir, outputs)
    # Locations whose declaration now writes elsewhere or is gone
    stale_locations: list[tuple[str, str]] = []

    for path, unit in expected.items():
        text = MARKER_MODULE_SOURCE if unit is None else unit.text
        existing = _read_text(path)

        if unit is not None and cache is not None and existing is not None:
            identity = unit.record.fully_qualified_name
            if cache.is_up_to_date(identity, unit.record, _digest(existing)):
                unchanged += 1
                continue
        elif existing == text:
            unchanged += 1
            continue

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logger.info(f"[WRITTEN] {path}")
        written += 1
        if unit is not None and cache is not None:
            moved_from = cache.update(unit.record.fully_qualified_name, unit.record, _digest(text))
            if moved_from is not None:
                stale_locations.append(moved_from)

    if cache is None:
        return written, unchanged, 0

    live = {unit.record.fully_qualified_name for unit in outputs}
    stale_locations.extend(cache.prune(live))
    removed = _remove_stale(output_dir, stale_locations, expected)
    cache.save()

    return written, unchanged, removed


def _remove_stale(
    output_dir: Path, locations: list[tuple[str, str]], expected: dict[Path, OutputUnit | None]
) -> int:
    """Delete files of stale locations that no current output claims."""
    logger = get_logger(__name__)
    removed = 0
    for namespace, hint_name in locations:
        stale = output_path_for(output_dir, namespace, hint_name)
        if stale in expected or not stale.exists():
            continue
        stale.unlink()
        logger.info(f"[REMOVED] {stale}")
        removed += 1
    return removed


@log_timing
def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point: one generation pass over a source tree."""
    logger = get_logger(__name__)
    logger.debug("Starting enum extensions generator")

    args = parse_args(argv)

    # Load configuration
    try:
        config = Config.from_args(
            source_root=args.source_root,
            output_dir=args.output,
            verbose=args.verbose,
            log_dir=args.log_dir,
            use_cache=args.use_cache,
        )
        config.validate()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    LoggerSetup.initialize(config.log_dir, verbose=config.verbose)
    logger = get_logger(__name__)

    logger.debug(f"Source root: {config.source_root}")
    logger.debug(f"Output directory: {config.output_dir}")

    snapshot = collect_source_files(
        config.source_root, exclude=config.exclude, skip=[config.output_dir]
    )
    logger.info(f"Analysing {len(snapshot.files)} file(s) below {config.source_root}")

    generator = EnumGenerator()
    outputs = generator.supply(snapshot)

    if args.check:
        stale = check_outputs(config.output_dir, outputs)
        for path in stale:
            logger.error(f"[STALE] {path}")
        logger.info(f"Checked {len(outputs)} output(s): {len(stale)} missing or stale")
        sys.exit(1 if stale else 0)

    config.ensure_output_dir()
    cache = None
    if config.use_cache and get_config()["ENABLE_PERSISTENT_CACHE"]:
        try:
            cache = PersistentDescriptionCache(get_cache_file_path(config.output_dir))
        except ValueError as e:
            logger.error(str(e))
            sys.exit(1)

    written, unchanged, removed = write_outputs(config.output_dir, outputs, cache)

    # Print summary
    logger.info("=" * 70)
    logger.info("GENERATION SUMMARY")
    logger.info("=" * 70)
    logger.info(f"Enums generated: {len(outputs)}")
    logger.info(f"Files written: {written}")
    logger.info(f"Files unchanged: {unchanged}")
    logger.info(f"Files removed: {removed}")
    logger.info(f"Diagnostics: {len(generator.diagnostics)}")
    for diagnostic in generator.diagnostics:
        logger.info(f"  - {diagnostic}")

    logger.debug("Main program completed successfully")
    sys.exit(0)


if __name__ == "__main__":
    main()
