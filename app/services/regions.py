import logging
import os
from types import MappingProxyType
from typing import Dict, List, Mapping

from fastapi import Request

from app.core.errors import LookupNotFoundError, RateTableError
from app.services.rate_tables import read_json_file

logger = logging.getLogger(__name__)

COUNTRIES_BY_REGION_FILE = "countriesbyregion.json"
CURRENCY_FILE = "currency.json"
DEFAULT_CURRENCY = "USD"


class RegionDirectory:

    def __init__(self, countries_by_region: Mapping[str, List[str]], currencies: Mapping[str, str]):
        self._regions = MappingProxyType({r: tuple(c) for r, c in countries_by_region.items()})
        self._currencies = MappingProxyType(dict(currencies))

    def regions(self) -> List[str]:
        return list(self._regions)

    def countries(self, region: str) -> List[str]:
        countries = self._regions.get(region)
        if countries is None:
            raise LookupNotFoundError("Region not found", table=COUNTRIES_BY_REGION_FILE)
        return list(countries)

    def currency_for(self, country: str) -> str:
        return self._currencies.get(country, DEFAULT_CURRENCY)

    def countries_with_currency(self, region: str) -> List[Dict[str, str]]:
        return [
            {"name": country, "currency": self.currency_for(country)}
            for country in self.countries(region)
        ]


def _load_mapping(path: str) -> dict:
    name = os.path.basename(path)
    if not os.path.exists(path):
        logger.warning(f"{name} not found, serving an empty listing")
        return {}
    data = read_json_file(path)
    if not isinstance(data, dict):
        raise RateTableError(f"{name} must contain an object", table=name)
    return data


def load_region_directory(data_dir: str) -> RegionDirectory:
    countries_by_region = _load_mapping(os.path.join(data_dir, COUNTRIES_BY_REGION_FILE))
    currencies = _load_mapping(os.path.join(data_dir, CURRENCY_FILE))
    logger.info(f"Loaded {len(countries_by_region)} regions, {len(currencies)} currencies")
    return RegionDirectory(countries_by_region, currencies)


def get_region_directory(request: Request) -> RegionDirectory:
    directory = getattr(request.app.state, "region_directory", None)
    if directory is None:
        raise RuntimeError("Region directory not loaded. Start the app through its lifespan.")
    return directory
