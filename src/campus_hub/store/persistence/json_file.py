"""Local JSON file medium."""

from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Optional, Sequence, Union

from ...core.errors import PersistenceUnavailable
from ...schemas import RECORD_TYPES
from ..entity_store import Change, Snapshot
from .base import LoadedTables, PersistenceAdapter, decode_records, encode_record

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class JsonFilePersistence(PersistenceAdapter):
    """Stores every kind in one JSON document, replaced atomically on save.

    Layout::

        {"version": 1, "kinds": {"accounts": [...], "groups": [...], ...}}

    The fingerprint is a SHA-256 of the file bytes.
    """

    name = "json"

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load_all(self) -> LoadedTables:
        return self.load_state()[0]

    def load_state(self) -> tuple[LoadedTables, Optional[str]]:
        """Decode the file and fingerprint the same bytes that were decoded."""

        try:
            raw_bytes = self.path.read_bytes()
        except FileNotFoundError:
            logger.info("no state file at %s; starting empty", self.path)
            return {}, None
        except OSError as exc:
            raise PersistenceUnavailable(f"cannot read {self.path}: {exc}") from exc
        return self._decode(raw_bytes), hashlib.sha256(raw_bytes).hexdigest()

    def _decode(self, raw_bytes: bytes) -> LoadedTables:
        try:
            payload = json.loads(raw_bytes)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("state file %s is not valid JSON (%s); starting empty", self.path, exc)
            return {}
        if not isinstance(payload, dict) or not isinstance(payload.get("kinds"), dict):
            logger.warning("state file %s has an unexpected layout; starting empty", self.path)
            return {}

        kinds = payload["kinds"]
        return {kind: decode_records(kind, kinds.get(kind)) for kind in RECORD_TYPES}

    def save(self, snapshot: Snapshot, changes: Optional[Sequence[Change]] = None) -> Optional[str]:
        payload = {
            "version": FORMAT_VERSION,
            "kinds": {
                kind: [encode_record(record) for record in snapshot.get_all(kind)]
                for kind in RECORD_TYPES
            },
        }
        data = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise PersistenceUnavailable(f"cannot write {self.path}: {exc}") from exc
        return hashlib.sha256(data).hexdigest()

    def fingerprint(self) -> Optional[str]:
        try:
            return hashlib.sha256(self.path.read_bytes()).hexdigest()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceUnavailable(f"cannot read {self.path}: {exc}") from exc
