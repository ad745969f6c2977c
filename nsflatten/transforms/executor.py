"""
File writing for converted modules.

This module provides the ConversionExecutor class that handles all file I/O
for conversions, including:

- Atomic write sessions with rollback capability
- Backup creation and restoration
- Validated writing: output that no longer parses is never written
- Dry runs that report what would be written

Example:
    >>> executor = ConversionExecutor(backup_enabled=True)
    >>> with executor.atomic_write_session():
    ...     executor.write_validated(path, converted_source)
"""

from __future__ import annotations

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional

from ..syntax.module import JsSyntaxError
from ..syntax.parser import parse_source

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


class ConversionExecutor:
    """
    Writes converted files with backups and rollback.

    Attributes:
        backup_enabled: Whether to copy a file to ``<name>.bak`` before overwriting it
        dry_run: Whether to skip all writes
    """

    def __init__(self, backup_enabled: bool = True, dry_run: bool = False):
        self.backup_enabled = backup_enabled
        self.dry_run = dry_run

        self._created_files: List[Path] = []
        self._originals: Dict[Path, bytes] = {}
        self.written: List[Path] = []

    @contextmanager
    def atomic_write_session(self):
        """
        Context manager for atomic write operations with rollback.

        Raises:
            Exception: Re-raises any exception after rollback
        """
        self._created_files = []
        self._originals = {}
        try:
            yield self
        except Exception:
            self.rollback()
            raise

    def rollback(self) -> None:
        """Undo every write made during the session."""
        logger.warning("Rolling back changes...")
        for path in reversed(self._created_files):
            try:
                if path.exists():
                    path.unlink()
            except OSError as e:
                logger.error("Failed to remove %s: %s", path, e)

        for path, content in self._originals.items():
            try:
                path.write_bytes(content)
                logger.info("Restored original: %s", path)
            except OSError as e:
                logger.error("Failed to restore %s: %s", path, e)

        self._created_files = []
        self._originals = {}

    def create_backup(self, path: Path) -> Optional[Path]:
        if not self.backup_enabled or self.dry_run or not path.exists():
            return None
        backup_path = path.with_name(path.name + BACKUP_SUFFIX)
        shutil.copy2(path, backup_path)
        self._created_files.append(backup_path)
        logger.info("Backup created: %s", backup_path)
        return backup_path

    def write_validated(self, path: Path, content: str, encoding: str = "utf-8") -> bool:
        """
        Write `content` to `path` after checking it still parses.

        Returns:
            True if the file was written, False for a dry run.

        Raises:
            JsSyntaxError: If `content` is not valid JavaScript.
        """
        try:
            parse_source(content)
        except JsSyntaxError as e:
            raise JsSyntaxError(f"Refusing to write {path}: {e}", e.line, e.column) from e

        if self.dry_run:
            logger.info("Dry run, not writing %s", path)
            return False

        path = Path(path)
        if path.exists():
            self._originals.setdefault(path, path.read_bytes())
            self.create_backup(path)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._created_files.append(path)

        path.write_text(content, encoding=encoding)
        self.written.append(path)
        return True
