"""Filesystem side of configuration updates.

Copyright (c) 2025 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import os
import time

from .constants import BACKUP_SUFFIX, PERMISSION_TEST_PREFIX
from .dto import ArtifactDTO, WrittenArtifactDTO
from .utils import log


def _read_bytes(path: str) -> bytes | None:
    if not os.path.exists(path):
        return None
    with open(path, "rb") as file:
        return file.read()


def _restore(path: str, content: bytes | None) -> None:
    """Put bytes back, `None` means the file did not exist."""
    if content is None:
        if os.path.exists(path):
            os.remove(path)
        return

    with open(path, "wb") as file:
        file.write(content)


class WriteJournal:
    """Artifacts written during one update, newest last."""

    def __init__(self) -> None:
        """Create empty journal."""
        self.entries: list[WrittenArtifactDTO] = []

    def add(self, entry: WrittenArtifactDTO) -> None:
        self.entries.append(entry)

    @property
    def paths(self) -> list[str]:
        """Written file paths in write order."""
        return [entry.path for entry in self.entries]

    def rollback(self) -> list[str]:
        """Put every journaled file and its `.bak` back to pre-update state.

        Files that did not exist before the update are removed. Restoring
        is attempted for every entry, failures are logged and returned.

        Returns:
            list[str]: paths that could not be restored.

        """
        failed = []
        for entry in reversed(self.entries):
            try:
                _restore(entry.path, entry.previous_content)
                if entry.backup_path is not None:
                    _restore(entry.backup_path, entry.previous_backup)
            except OSError as err:
                log.error(f"Can not restore {entry.path}: {err}")
                failed.append(entry.path)
                continue

            if entry.previous_content is None:
                log.info(f"Removed new file {entry.path}")
            else:
                log.info(f"Restored {entry.path} from backup")

        self.entries.clear()
        return failed


class ConfigFileWriter:
    """Writes artifacts keeping one previous generation in `.bak`."""

    @staticmethod
    def ensure_directory(path: str) -> None:
        """Create directory recursively if it does not exist."""
        if os.path.isdir(path):
            return

        log.info(f"Creating directory: {path}")
        os.makedirs(path, exist_ok=True)

    @staticmethod
    def check_write_permission(directory: str) -> bool:
        """Check directory by creating and removing a scratch file."""
        if not os.path.isdir(directory):
            log.error(f"Directory does not exist: {directory}")
            return False

        scratch = os.path.join(
            directory,
            f"{PERMISSION_TEST_PREFIX}{time.time_ns()}",
        )
        try:
            with open(scratch, "w") as file:
                file.write("test")
            os.remove(scratch)
        except OSError as err:
            log.error(f"No write permission for {directory}: {err}")
            return False

        return True

    @staticmethod
    def backup(path: str) -> WrittenArtifactDTO:
        """Copy current bytes of file to `<path>.bak` if the file exists.

        The `.bak` being replaced is kept in the result too, so a rollback
        brings back both generations.
        """
        previous_content = _read_bytes(path)
        if previous_content is None:
            return WrittenArtifactDTO(
                path=path,
                previous_content=None,
                backup_path=None,
            )

        backup_path = f"{path}{BACKUP_SUFFIX}"
        previous_backup = _read_bytes(backup_path)
        with open(backup_path, "wb") as file:
            file.write(previous_content)
        log.info(f"Created backup of {path} at {backup_path}")

        return WrittenArtifactDTO(
            path=path,
            previous_content=previous_content,
            backup_path=backup_path,
            previous_backup=previous_backup,
        )

    @staticmethod
    def write(path: str, content: str) -> None:
        with open(path, "w", encoding="utf-8") as file:
            file.write(content)
        log.info(f"Successfully wrote file to {path}")

    def write_with_backup(
        self,
        path: str,
        content: str,
        journal: WriteJournal | None = None,
    ) -> WrittenArtifactDTO:
        """Write file, copy its current bytes to `<path>.bak` first.

        Only the most recent previous version is kept. The journal entry
        is added before the write, a half written file is restorable.

        Args:
            path (str): target file.
            content (str): new file content.
            journal (WriteJournal | None): journal of the running update.

        Returns:
            WrittenArtifactDTO: path with its previous content.

        """
        written = self.backup(path)
        if journal is not None:
            journal.add(written)
        self.write(path, content)
        return written

    def write_artifacts(
        self,
        artifacts: list[ArtifactDTO],
        journal: WriteJournal,
    ) -> None:
        """Write artifacts one by one, journaling each of them.

        Stops on the first failure, already written artifacts stay in the
        journal so the caller decides about rollback.
        """
        for artifact in artifacts:
            if artifact.zone_name:
                log.info(
                    f"Generating zone file for {artifact.zone_name} "
                    f"at {artifact.path}",
                )
            self.write_with_backup(artifact.path, artifact.content, journal)
