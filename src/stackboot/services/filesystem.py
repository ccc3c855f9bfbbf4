"""Filesystem helpers for stackboot."""

import logging
import os

from stackboot.errors import BootstrapError


class FileSystemService:
    """Encapsulates idempotent file and directory side effects."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def ensure_directory(self, path: str) -> bool:
        if os.path.isdir(path):
            return False

        try:
            os.makedirs(path, exist_ok=True)
        except OSError as exc:
            raise BootstrapError(f"Could not create directory {path}: {exc}") from exc
        self.logger.debug("Created directory: %s", path)
        return True

    def ensure_ignore_entry(self, ignore_file: str, entry: str) -> bool:
        """Adds ``entry`` as its own line unless an equal line is already present."""
        try:
            if not os.path.exists(ignore_file):
                with open(ignore_file, "w", encoding="utf-8") as file_obj:
                    file_obj.write(f"{entry}\n")
                return True

            with open(ignore_file, "r", encoding="utf-8") as file_obj:
                content = file_obj.read()

            if entry in (line.rstrip() for line in content.splitlines()):
                return False

            with open(ignore_file, "a", encoding="utf-8") as file_obj:
                if content and not content.endswith("\n"):
                    file_obj.write("\n")
                file_obj.write(f"{entry}\n")
        except (OSError, UnicodeDecodeError) as exc:
            raise BootstrapError(f"Could not update {ignore_file}: {exc}") from exc

        return True
