# src/store/persistence.py — v1
"""Friends file: the durable relationship map as pretty-printed JSON.

Layout::

    {
      "069a79f4-44e9-4726-a5be-fca90e38aaf5": {
        "uuid": "069a79f4-44e9-4726-a5be-fca90e38aaf5",
        "name": "Notch",
        "affinity": "FRIEND"
      }
    }

Keys are UUID strings, affinity is one of FRIEND / ENEMY / NEUTRAL and any
extra profile fields are written and read back untouched.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from playerbook.core.models import Affinity, Profile

logger = logging.getLogger(__name__)

_PROFILE_MAP = TypeAdapter(dict[UUID, Profile])


class PersistenceFailure(Exception):
    """The friends file could not be read or written."""

    def __init__(self, path: Path, action: str, cause: Exception) -> None:
        self.path = path
        self.action = action
        self.cause = cause
        super().__init__(f"Failed to {action} {path}: {cause}")


class ProfileFile:
    """Reads and writes the durable map at a fixed path."""

    def __init__(self, path: str | Path, atomic: bool = True) -> None:
        self._path = Path(path).expanduser()
        self._atomic = atomic

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> dict[UUID, Profile]:
        """Decode the file into a UUID -> Profile map.

        Entries whose key disagrees with the profile's own uuid, or whose
        affinity is NEUTRAL, are skipped.

        Raises:
            PersistenceFailure: On I/O errors or undecodable content.
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceFailure(self._path, "read", e) from e

        if text.strip() in ("", "null"):
            return {}

        try:
            decoded = _PROFILE_MAP.validate_json(text)
        except ValidationError as e:
            raise PersistenceFailure(self._path, "decode", e) from e

        profiles: dict[UUID, Profile] = {}
        for key, profile in decoded.items():
            if profile.uuid != key:
                logger.warning(
                    "Skipping entry %s: profile uuid is %s", key, profile.uuid
                )
                continue
            if profile.affinity is Affinity.NEUTRAL:
                logger.warning("Skipping entry %s: neutral profiles are not stored", key)
                continue
            profiles[key] = profile
        return profiles

    def write(self, profiles: Mapping[UUID, Profile]) -> None:
        """Overwrite the file with ``profiles``.

        Raises:
            PersistenceFailure: On I/O errors.
        """
        payload = _PROFILE_MAP.dump_json(dict(profiles), indent=2).decode("utf-8")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if self._atomic:
                self._replace(payload)
            else:
                self._path.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise PersistenceFailure(self._path, "write", e) from e

    def _replace(self, payload: str) -> None:
        """Write to a sibling temp file, then rename it over the target."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
