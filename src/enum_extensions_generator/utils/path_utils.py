"""Path utilities for source discovery and output placement."""

import fnmatch
import re
import string
from collections.abc import Iterable
from pathlib import Path, PurePath

from ..domain.models import ProgramSnapshot, SourceFile
from ..infrastructure.logging import get_logger

logger = get_logger(__name__)

SKIPPED_DIRECTORIES = frozenset({"__pycache__", ".git", ".hg", ".tox", ".venv", "venv", "node_modules"})


def sanitize_for_filesystem(name: str, replacement: str = "_") -> str:
    """Sanitize a string to be safe for use as a file or directory name."""
    if not name:
        return "unnamed"

    valid_chars = set(string.ascii_letters + string.digits + "_-.")
    sanitized = "".join(c if c in valid_chars else replacement for c in name)

    # Collapse multiple replacement characters
    if replacement in sanitized:
        pattern = re.escape(replacement) + "+"
        sanitized = re.sub(pattern, replacement, sanitized)

    sanitized = sanitized.strip(replacement)
    if not sanitized or sanitized in (".", ".."):
        sanitized = "unnamed"

    if len(sanitized) > 200:
        sanitized = sanitized[:200].rstrip(replacement)

    return sanitized


def module_name_for_path(root: Path, path: Path) -> str:
    """Derive the dotted module name of a source file below a root.

    ``pkg/__init__.py`` maps to ``pkg``; a top-level ``__init__.py`` maps to
    the empty name.

    Args:
        root: Directory the import system would search
        path: Python file below ``root``

    Returns:
        Dotted module name
    """
    parts = list(PurePath(path).relative_to(root).with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


def _is_excluded(relative: PurePath, exclude: Iterable[str]) -> bool:
    text = relative.as_posix()
    return any(fnmatch.fnmatch(text, pattern) for pattern in exclude)


def collect_source_files(
    root: Path, exclude: Iterable[str] = (), skip: Iterable[Path] = ()
) -> ProgramSnapshot:
    """Read every ``*.py`` file below a root into a snapshot.

    Args:
        root: Source root
        exclude: Glob patterns matched against root-relative POSIX paths
        skip: Directories to leave out (for instance the output directory)

    Returns:
        Snapshot ordered by path
    """
    exclude = tuple(exclude)
    skipped = [p.resolve() for p in skip]
    files = []
    for path in sorted(root.rglob("*.py")):
        relative = path.relative_to(root)
        if any(part in SKIPPED_DIRECTORIES for part in relative.parts[:-1]):
            continue
        resolved = path.resolve()
        if any(resolved.is_relative_to(s) for s in skipped):
            continue
        if _is_excluded(relative, exclude):
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"Skipping {relative}: not UTF-8 ({e})")
            continue
        files.append(
            SourceFile(
                path=relative.as_posix(),
                module=module_name_for_path(root, path),
                text=text,
            )
        )
    return ProgramSnapshot(tuple(files))


def output_path_for(output_dir: Path, namespace: str, hint_name: str) -> Path:
    """Location of a generated module: one directory per namespace segment."""
    directory = output_dir
    for segment in namespace.split(".") if namespace else ():
        directory = directory / sanitize_for_filesystem(segment)
    return directory / f"{sanitize_for_filesystem(hint_name)}.py"
