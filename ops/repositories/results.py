"""Read-only access to constituency result records."""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Union

from loguru import logger

from dashboard.errors import LoadFailure
from dashboard.models import ResultRecord, normalize_constituency_id

from .fetch import fetch_json


class ResultRepository(Mapping[int, ResultRecord]):
    """
    Immutable mapping of constituency id to ResultRecord.

    Keys in the results JSON may be serialized as strings ("12") or numbers;
    both are normalized to int.

    Example:
        results = ResultRepository.load("data/election_results.json")
        record = results[12]
    """

    def __init__(self, records: Mapping[int, ResultRecord]):
        self._records: Mapping[int, ResultRecord] = MappingProxyType(dict(records))

    def __getitem__(self, key: int) -> ResultRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[int]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"ResultRepository({len(self)} records)"

    @property
    def reporting(self) -> int:
        return sum(1 for record in self._records.values() if record.reported)

    @classmethod
    def from_json(cls, data: Any, source: str = "<memory>") -> "ResultRepository":
        """
        Parse the decoded results JSON.

        Args:
            data: Object keyed by constituency id
            source: Location used in error messages

        Returns:
            ResultRepository

        Raises:
            LoadFailure: The document is not an object of result entries
        """
        if not isinstance(data, dict):
            raise LoadFailure(source, f"expected an object keyed by constituency, got {type(data).__name__}")

        records: Dict[int, ResultRecord] = {}
        skipped = 0
        for raw_key, entry in data.items():
            key = normalize_constituency_id(raw_key)
            if key is None or not isinstance(entry, dict):
                skipped += 1
                logger.debug(f"Skipping result entry {raw_key!r}")
                continue
            if key in records:
                logger.warning(f"⚠️ Duplicate result entry for constituency {key}, keeping the last")
            records[key] = ResultRecord.from_json(key, entry)

        if skipped:
            logger.warning(f"⚠️ Skipped {skipped} result entries with unusable keys")
        return cls(records)

    @classmethod
    def load(cls, location: Union[str, Path], timeout: float = 30) -> "ResultRepository":
        """Fetch and parse the results JSON from a path or URL."""
        logger.info(f"📊 Loading election results from {location}")
        repository = cls.from_json(fetch_json(location, timeout=timeout), source=str(location))
        logger.success(
            f"  ✅ Loaded {len(repository):,} result records ({repository.reporting:,} reporting)"
        )
        return repository
