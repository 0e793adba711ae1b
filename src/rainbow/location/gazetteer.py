from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import ValidationError

from ..domain.models import CityRecord
from ..errors import MalformedSourceError

LOGGER = logging.getLogger(__name__)

DEFAULT_GAZETTEER_PATH = Path(__file__).resolve().parent.parent / "data" / "cities.csv"

# Provider gazetteer header -> CityRecord field
COLUMN_FIELDS = {
    "序号": "sequence",
    "城市ID": "id",
    "行政归属": "parent_region",
    "城市简称": "short_name",
    "拼音": "pinyin",
    "lat": "lat",
    "lon": "lon",
}

ADMINISTRATIVE_SUFFIXES = ("市", "区")


def normalize_query(query: str) -> str:
    text = query
    for suffix in ADMINISTRATIVE_SUFFIXES:
        text = text.replace(suffix, "")
    return text.strip()


class CityTable:
    """Read-only, ordered city table answering name -> provider id lookups."""

    def __init__(self, records: Iterable[CityRecord]) -> None:
        self._records: tuple[CityRecord, ...] = tuple(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[CityRecord]:
        return iter(self._records)

    @property
    def records(self) -> tuple[CityRecord, ...]:
        return self._records

    def resolve(self, query: str) -> str | None:
        # First match in file order wins; ambiguous short names are not ranked.
        normalized = normalize_query(query)
        if not normalized:
            return None
        for record in self._records:
            if record.short_name.strip().endswith(normalized):
                return record.id
        return None


def _read_lines(source: Path | str | Iterable[str]) -> list[str]:
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            return path.read_text(encoding="utf-8-sig").splitlines()
        except (OSError, UnicodeDecodeError) as exc:
            raise MalformedSourceError(f"Unable to read gazetteer file: {path}") from exc
    return [line.rstrip("\r\n") for line in source]


def _parse_rows(lines: list[str]) -> list[CityRecord]:
    if lines and lines[0].startswith("\ufeff"):
        lines[0] = lines[0][1:]

    reader = csv.DictReader(line for line in lines if line.strip())
    header = [name.strip() for name in reader.fieldnames or []]
    missing = [column for column in COLUMN_FIELDS if column not in header]
    if missing:
        raise MalformedSourceError(f"Gazetteer header is missing columns: {', '.join(missing)}")

    records: list[CityRecord] = []
    for row_number, row in enumerate(reader, start=2):
        values = {
            COLUMN_FIELDS[name.strip()]: (value or "").strip()
            for name, value in row.items()
            if name is not None and name.strip() in COLUMN_FIELDS
        }
        try:
            records.append(CityRecord.model_validate(values))
        except ValidationError as exc:
            raise MalformedSourceError(f"Invalid gazetteer row {row_number}: {exc}") from exc
    return records


def load_city_table(source: Path | str | Iterable[str] = DEFAULT_GAZETTEER_PATH) -> CityTable:
    table = CityTable(_parse_rows(_read_lines(source)))
    LOGGER.info("Loaded %d gazetteer entries", len(table))
    return table
