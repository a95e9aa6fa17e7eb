"""Build registry: persistent mapping of build folders to their metadata.

The on-disk document is a flat JSON object keyed by folder name::

    {
      "godot-4.2.1-steam": {
        "version": "4.2.1-stable",
        "name": "steam",
        "created": "2026-01-04T12:00:00"
      }
    }

Unknown fields are ignored on read so older and newer versions of the
tool can share a document. Writes go through a temporary file and
``os.replace`` so readers never observe a half-written document.
"""

import json
import logging
import os
import tempfile
from collections.abc import Collection, Mapping
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from ..errors import RegistryError
from ..models import BuildRecord

logger = logging.getLogger(__name__)


class RegistryEntry(BaseModel):
    """On-disk shape of one registry entry."""

    model_config = ConfigDict(extra="ignore")

    version: str
    name: str
    created: datetime


_DOCUMENT = TypeAdapter(dict[str, RegistryEntry])


def to_entry(record: BuildRecord) -> RegistryEntry:
    return RegistryEntry(
        version=record.version_tag,
        name=record.variant_name,
        created=record.created_at,
    )


def from_entry(identity: str, entry: RegistryEntry) -> BuildRecord:
    return BuildRecord(
        identity=identity,
        version_tag=entry.version,
        variant_name=entry.name,
        created_at=entry.created,
    )


def parse_document(text: str) -> dict[str, BuildRecord]:
    """Parse a registry document.

    Raises:
        ValueError: If the text is not a valid registry document
    """
    try:
        entries = _DOCUMENT.validate_json(text)
    except ValidationError as e:
        raise ValueError(str(e)) from e
    return {identity: from_entry(identity, entry) for identity, entry in entries.items()}


def render_document(records: Mapping[str, BuildRecord]) -> str:
    """Serialize records deterministically (sorted keys, 2-space indent)."""
    document = {
        identity: to_entry(record).model_dump(mode="json")
        for identity, record in records.items()
    }
    return json.dumps(document, indent=2, sort_keys=True) + "\n"


class BuildRegistry:
    """Repository over the registry document.

    ``upsert`` only changes the in-memory mapping; callers persist with
    ``save``. No locking: one process, one run at a time.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.records: dict[str, BuildRecord] = {}

    def load(self) -> dict[str, BuildRecord]:
        """Read the document.

        A missing, empty or malformed document yields an empty mapping.
        """
        self.records = {}
        if not self.path.exists():
            return self.records
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("Could not read build registry %s: %s", self.path, e)
            return self.records
        if not text.strip():
            return self.records
        try:
            self.records = parse_document(text)
        except ValueError:
            logger.warning("Ignoring malformed build registry: %s", self.path)
        return self.records

    def save(self, records: Mapping[str, BuildRecord] | None = None) -> None:
        """Overwrite the document with ``records`` (default: the loaded mapping).

        Raises:
            RegistryError: If the document cannot be written
        """
        if records is not None:
            self.records = dict(records)
        content = render_document(self.records)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise RegistryError(f"Could not write build registry {self.path}: {e}") from e

    def upsert(self, identity: str, record: BuildRecord) -> None:
        """Insert or replace the entry for ``identity``."""
        self.records[identity] = record

    def get(self, identity: str, on_disk: Collection[str] = ()) -> BuildRecord | None:
        """Look up a record by folder name.

        An exact match wins. Otherwise a case-insensitive match is
        returned, so a folder renamed only in case still resolves, unless
        that key names a folder listed in ``on_disk``: a key that has its
        own folder never stands in for a different one.
        """
        if identity in self.records:
            return self.records[identity]
        folded = identity.casefold()
        for key, record in self.records.items():
            if key.casefold() == folded and key not in on_disk:
                return record
        return None
