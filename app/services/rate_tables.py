"""Read-only store for the static rate datasets"""
import json
import logging
import os
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from fastapi import Request

from app.core.enums import RateFile
from app.core.errors import LookupNotFoundError, RateTableError
from app.core.metrics import rate_lookup_failures, rate_tables_loaded

logger = logging.getLogger(__name__)

COUNTRY_FIELD = "Country"


def _normalize(country: str) -> str:
    return country.strip().lower()


class RateTable:

    def __init__(self, name: str, records: Iterable[Mapping]):
        self.name = name
        index: Dict[str, Mapping] = {}
        for row in records:
            if not isinstance(row, Mapping):
                raise RateTableError(f"Malformed record in {name}", table=name)
            country = row.get(COUNTRY_FIELD)
            if not isinstance(country, str):
                raise RateTableError(f"Record without {COUNTRY_FIELD} in {name}", table=name)
            # first occurrence wins
            index.setdefault(_normalize(country), MappingProxyType(dict(row)))
        self._index = MappingProxyType(index)

    def __len__(self) -> int:
        return len(self._index)

    def countries(self) -> List[str]:
        return [row[COUNTRY_FIELD] for row in self._index.values()]

    def record_for(self, country: str) -> Mapping:
        record = self._index.get(_normalize(country))
        if record is None:
            rate_lookup_failures.labels(table=self.name).inc()
            raise LookupNotFoundError(
                f"No data for {country} in {self.name}",
                table=self.name,
                country=country,
            )
        return record

    def rate(self, country: str, field: str) -> float:
        record = self.record_for(country)
        value = record.get(field)
        if value is None:
            rate_lookup_failures.labels(table=self.name).inc()
            raise LookupNotFoundError(
                f"Price not found for {field} in {self.name}",
                table=self.name,
                country=country,
                field=field,
            )
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise RateTableError(
                f"Non-numeric value for {field} ({country}) in {self.name}",
                table=self.name,
            )
        return float(value)


class RateTables:
    """Immutable collection of rate tables keyed by dataset file name"""

    def __init__(self, tables: Mapping[str, RateTable]):
        self._tables = MappingProxyType(dict(tables))

    @classmethod
    def from_records(cls, datasets: Mapping[str, Iterable[Mapping]]) -> "RateTables":
        return cls({str(name): RateTable(str(name), rows) for name, rows in datasets.items()})

    def __contains__(self, name) -> bool:
        return str(name) in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def names(self) -> List[str]:
        return list(self._tables)

    def table(self, name) -> RateTable:
        name = str(name)
        table = self._tables.get(name)
        if table is None:
            rate_lookup_failures.labels(table=name).inc()
            raise LookupNotFoundError(f"File {name} not found", table=name)
        return table


def read_json_file(path: str):
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise RateTableError(f"Invalid JSON in {os.path.basename(path)}: {e}") from e


def load_rate_tables(data_dir: str, names: Optional[Iterable[str]] = None) -> RateTables:
    """Read every known rate dataset present in data_dir.

    A missing file is not fatal here: it is logged and reported as a
    LookupNotFoundError when a quote needs it.
    """
    if names is None:
        names = [f.value for f in RateFile]

    tables: Dict[str, RateTable] = {}
    for name in names:
        path = os.path.join(data_dir, name)
        if not os.path.exists(path):
            logger.warning(f"Rate table {name} not found in {data_dir}")
            continue

        data = read_json_file(path)
        if not isinstance(data, list):
            raise RateTableError(f"{name} must contain a list of records", table=name)

        tables[name] = RateTable(name, data)
        logger.info(f"Loaded {name} ({len(tables[name])} countries)")

    rate_tables_loaded.set(len(tables))
    return RateTables(tables)


def get_rate_tables(request: Request) -> RateTables:
    tables = getattr(request.app.state, "rate_tables", None)
    if tables is None:
        raise RuntimeError("Rate tables not loaded. Start the app through its lifespan.")
    return tables
