"""
RestMock Object Store

Durable, file-backed collection of response records shared between the
test runner process and the system under test.

Features:
- Append-only until reset (whole-file read-modify-write)
- Pretty-printed JSON array on disk, diffable by humans
- First-registered, first-matched search with regex-aware criteria
- Storage failures degrade to an empty store instead of raising
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

from ..common import safe_json_parse, to_mapping, make_store_path, DEFAULT_PREFIX
from .criteria import record_matches
from .records import StoredRecord, CRITERIA_KEY

logger = logging.getLogger("restmock.storage")


class ObjectStore:
    """
    File-backed store of response records.

    Every operation reads or rewrites the whole backing file, so two
    processes pointed at the same path see the same records. Writes from
    both sides at once can lose an update (last writer wins); in practice
    only the test runner registers records.

    Example:
        store = ObjectStore('/tmp/responses.json')
        store.add({'code': 200, 'data': 'ok', 'criteria': {'method': 'GET', 'url': 'users/1'}})

        record = store.search({'method': 'GET', 'url': 'users/1'})
        if record is not None:
            print(record['code'])
    """

    def __init__(
        self,
        filename: Optional[Union[str, Path]] = None,
        scratch_dir: Optional[str] = None,
        prefix: str = DEFAULT_PREFIX
    ):
        """
        Initialize object store.

        Args:
            filename: Path of the backing file. If empty, an ad hoc file
                name is generated in scratch_dir.
            scratch_dir: Directory for generated file names
            prefix: Prefix for generated file names
        """
        if filename:
            self._filename = Path(filename)
        else:
            self._filename = make_store_path(scratch_dir=scratch_dir, prefix=prefix)

        self._init_file()

    def __repr__(self) -> str:
        return f"ObjectStore({str(self._filename)!r})"

    @property
    def filename(self) -> Path:
        """Path of the backing file (the store identity)."""
        return self._filename

    @filename.setter
    def filename(self, filename: Union[str, Path]):
        self._filename = Path(filename)

    def _init_file(self, reset: bool = False) -> bool:
        """Create the backing file empty if missing, or truncate it on reset."""
        if self._filename.exists() and not reset:
            return True

        try:
            self._filename.write_text('', encoding='utf-8')
            return True
        except OSError as e:
            logger.warning(f"Could not initialise response store {self._filename}: {e}")
            return False

    def add(self, record: Union[Dict[str, Any], StoredRecord]) -> bool:
        """
        Append a record and persist the whole collection.

        Args:
            record: Record dict (payload fields plus 'criteria') or StoredRecord

        Returns:
            True if the collection was written, False on failure
        """
        if isinstance(record, StoredRecord):
            record = record.to_dict()

        contents = self.get_all()
        contents.append(record)

        return self._write(contents)

    def reset(self) -> bool:
        """Remove all records, keeping the backing file in place."""
        logger.debug(f"Resetting response store {self._filename}")
        return self._init_file(reset=True)

    def get_all(self) -> List[Dict[str, Any]]:
        """
        Get all stored records in insertion order.

        Returns:
            List of record dicts, or an empty list if the file is missing,
            unreadable or does not hold a JSON array
        """
        try:
            contents = self._filename.read_text(encoding='utf-8')
        except FileNotFoundError:
            logger.debug(f"Response store {self._filename} does not exist yet")
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read response store {self._filename}: {e}")
            return []

        records = self._import(contents)
        if not isinstance(records, list):
            if contents.strip():
                logger.warning(f"Ignoring malformed response store {self._filename}")
            return []

        return records

    def search(self, criteria: Any) -> Optional[Dict[str, Any]]:
        """
        Find the first record whose criteria satisfy every searched field.

        A record matches when its criteria contain each field of the search
        and each stored value matches the searched one (regex or strict
        equality). Fields present only in the record are ignored.

        Args:
            criteria: Mapping (or attribute object) of field -> value

        Returns:
            The full stored record (criteria included), or None
        """
        search = to_mapping(criteria)
        if not search:
            return None

        for record in self.get_all():
            if not isinstance(record, Mapping):
                continue
            record_criteria = record.get(CRITERIA_KEY)
            if not isinstance(record_criteria, Mapping):
                continue

            if record_matches(record_criteria, search):
                return record

        return None

    def delete(self) -> bool:
        """
        Remove the backing file.

        Only the owner of the store should call this, at the end of its
        test. Nothing deletes the file implicitly.
        """
        try:
            self._filename.unlink()
            logger.debug(f"Deleted response store {self._filename}")
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Could not delete response store {self._filename}: {e}")
            return False

    def _write(self, records: List[Dict[str, Any]]) -> bool:
        """Atomically replace the backing file with the given records."""
        tmp_path = self._filename.with_name(f".{self._filename.name}.{os.getpid()}.tmp")

        try:
            content = self._export(records)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(str(tmp_path), str(self._filename))
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not write response store {self._filename}: {e}")
            if tmp_path.exists():
                tmp_path.unlink()
            return False

    @staticmethod
    def _export(records: List[Dict[str, Any]]) -> str:
        """Serialize records for writing."""
        return json.dumps(records, indent=4)

    @staticmethod
    def _import(data: str) -> Any:
        """Deserialize records after reading."""
        return safe_json_parse(data, default=None)
