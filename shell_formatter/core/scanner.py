"""
File Scanner Module

This module collects the files to format from the paths given on the
command line: explicit files are taken as they are, directories are
walked recursively while skipping well-known build and VCS directories
and anything excluded by ``.gitignore`` or ``.dockerignore`` files.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import pathspec

from .dispatch import FormatKind, detect_kind

logger = logging.getLogger(__name__)

DEFAULT_IGNORES = [
    '.git',
    'node_modules',
    'vendor',
    'target',
    'dist',
    '.cache',
    '.idea',
    '.vscode',
    '.DS_Store',
]

IGNORE_FILES = ('.gitignore', '.dockerignore')


def load_ignore_patterns(directory: Path) -> List[str]:
    """Load the ignore-file patterns stored in ``directory``."""
    patterns: List[str] = []
    for name in IGNORE_FILES:
        ignore_file = directory / name
        if not ignore_file.is_file():
            continue
        patterns.extend(
            line.strip()
            for line in ignore_file.read_text(encoding='utf-8', errors='replace').splitlines()
            if line.strip() and not line.strip().startswith('#')
        )
    return patterns


def _match(spec: pathspec.PathSpec, relative: Path, is_dir: bool) -> bool:
    # A trailing slash lets directory-only patterns such as "build/" match.
    return spec.match_file(relative.as_posix() + ('/' if is_dir else ''))


@dataclass
class FileJob:
    """A file to format, with the root its mirror path is relative to."""
    path: Path
    root: Path

    @property
    def relative_path(self) -> Path:
        try:
            return self.path.relative_to(self.root)
        except ValueError:
            return Path(self.path.name)


class FileScanner:
    """
    Collector of files to format.

    This class provides:
    - Recursive directory walking with default ignore names
    - Extra glob ignore patterns
    - Kind filters (only / skip)
    """

    def __init__(self,
                 ignore_patterns: Optional[Iterable[str]] = None,
                 only: Optional[Set[FormatKind]] = None,
                 skip: Optional[Set[FormatKind]] = None):
        """
        Initialize the scanner.

        Args:
            ignore_patterns: Extra gitignore-style patterns, relative to the walked root
            only: If non-empty, only files of these kinds are collected
            skip: Files of these kinds are never collected
        """
        self.ignore_patterns = list(ignore_patterns or [])
        self.ignore_spec = pathspec.PathSpec.from_lines('gitwildmatch', self.ignore_patterns)
        self.only = set(only or ())
        self.skip = set(skip or ())

    def should_take(self, path: Path) -> bool:
        """Apply the kind filters. Unsupported files are kept and skipped later."""
        kind = detect_kind(path)
        if kind is None:
            return True
        if kind in self.skip:
            return False
        if self.only and kind not in self.only:
            return False
        return True

    def _is_ignored(self, path: Path, root: Path,
                    ignore_specs: Dict[Path, pathspec.PathSpec], is_dir: bool = False) -> bool:
        """
        Decide whether a path under ``root`` is excluded from the walk.

        Args:
            path: Absolute path of the file or directory
            root: Root of the walk
            ignore_specs: Ignore-file specs keyed by the directory holding them
            is_dir: Whether ``path`` is a directory
        """
        relative = path.relative_to(root)
        if any(part in DEFAULT_IGNORES for part in relative.parts):
            return True
        if _match(self.ignore_spec, relative, is_dir):
            return True

        for base, spec in ignore_specs.items():
            if base in path.parents and _match(spec, path.relative_to(base), is_dir):
                return True
        return False

    def scan_directory(self, directory: Path) -> List[FileJob]:
        """
        Collect all files under a directory.

        Args:
            directory: Directory to walk

        Returns:
            List of FileJob objects, sorted by path
        """
        jobs = []
        root = directory.resolve()
        ignore_specs: Dict[Path, pathspec.PathSpec] = {}

        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            patterns = load_ignore_patterns(current)
            if patterns:
                logger.debug(f"Loaded {len(patterns)} ignore patterns from {current}")
                ignore_specs[current] = pathspec.PathSpec.from_lines('gitwildmatch', patterns)

            dirnames[:] = sorted(
                d for d in dirnames
                if not self._is_ignored(current / d, root, ignore_specs, is_dir=True)
            )
            for filename in sorted(filenames):
                path = current / filename
                if self._is_ignored(path, root, ignore_specs):
                    continue
                if self.should_take(path):
                    jobs.append(FileJob(path=path, root=root))

        logger.info(f"Found {len(jobs)} files under {directory}")
        return jobs

    def collect(self, paths: Iterable[str]) -> List[FileJob]:
        """
        Collect files from a mix of file and directory paths.

        Args:
            paths: Paths given by the user

        Returns:
            List of FileJob objects
        """
        jobs: List[FileJob] = []

        for raw in paths:
            path = Path(raw)
            if not path.exists():
                logger.error(f"Path not found: {raw}")
                continue

            if path.is_file():
                resolved = path.resolve()
                if self.should_take(resolved):
                    jobs.append(FileJob(path=resolved, root=resolved.parent))
                continue

            jobs.extend(self.scan_directory(path))

        return jobs
