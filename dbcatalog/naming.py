# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Naming - Filename convention for catalog artifacts.

Every artifact is named backup_<DD-MM-YYYY>_<HH-MM-SS>.gz. The creation
time of an entry is read back from this name only, never from the
filesystem.
"""

import re
from dataclasses import dataclass
from datetime import datetime

from dbcatalog.exceptions import InvalidBackupName

BACKUP_PREFIX = "backup_"
COMPRESSION_EXTENSION = ".gz"
TIMESTAMP_FORMAT = "%d-%m-%Y_%H-%M-%S"

_BACKUP_NAME_RE = re.compile(
    r"^backup_(\d{2})-(\d{2})-(\d{4})_(\d{2})-(\d{2})-(\d{2})\.gz$"
)


@dataclass(frozen=True)
class BackupEntry:
    """One backup artifact on disk."""

    filename: str
    created_at: datetime
    size_bytes: int

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "size": self.size_bytes,
            "created_at": self.created_at.isoformat(),
        }


def generate_backup_name(now: datetime) -> str:
    """Name for a new dump, without the compression extension."""
    return BACKUP_PREFIX + now.strftime(TIMESTAMP_FORMAT)


def artifact_filename(name: str) -> str:
    """Append the compression extension unless already present."""
    if name.endswith(COMPRESSION_EXTENSION):
        return name
    return name + COMPRESSION_EXTENSION


def parse_backup_filename(filename: str) -> datetime:
    """
    Parse the creation time encoded in a backup filename.

    Args:
        filename: Artifact filename, e.g. backup_01-02-2023_10-00-00.gz

    Returns:
        Naive datetime of the dump

    Raises:
        InvalidBackupName: If the name deviates from the convention or
            encodes an impossible date/time
    """
    match = _BACKUP_NAME_RE.match(filename)
    if not match:
        raise InvalidBackupName(
            f"Not a backup filename: {filename!r}",
            details={"expected": "backup_DD-MM-YYYY_HH-MM-SS.gz"},
        )

    day, month, year, hour, minute, second = (int(g) for g in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise InvalidBackupName(
            f"Invalid timestamp in backup filename {filename!r}: {e}",
        ) from e


def is_safe_filename(filename: str) -> bool:
    """Only plain basenames may address catalog entries."""
    if not filename or filename in (".", ".."):
        return False
    if "/" in filename or "\\" in filename or "\x00" in filename:
        return False
    return ".." not in filename
