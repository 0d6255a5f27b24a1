"""
Country life-expectancy lookup.

Supplies the number that pre-populates ``life_expectancy`` before the week
calculator runs. The table comes from ``config/defaults.yaml`` when present,
otherwise from the built-in 2021 figures below.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..core.defaults_loader import get_config_value

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "India"
FALLBACK_YEARS = 80.0
OTHER_COUNTRY = "Other"

_BUILTIN_COUNTRIES: Dict[str, float] = {
    "Japan": 84.7,
    "Switzerland": 84.3,
    "Australia": 84.3,
    "Israel": 84.2,
    "South Korea": 83.7,
    "Sweden": 83.3,
    "France": 83.2,
    "Norway": 83.2,
    "Italy": 83.1,
    "Iceland": 83.0,
    "Canada": 82.7,
    "Ireland": 82.6,
    "Netherlands": 82.5,
    "New Zealand": 82.5,
    "Singapore": 82.4,
    "Luxembourg": 82.3,
    "Belgium": 81.9,
    "Finland": 81.8,
    "Portugal": 81.7,
    "United Kingdom": 80.9,
    "Germany": 80.6,
    "United States": 77.2,
    "China": 77.1,
    "Brazil": 75.9,
    "Russia": 73.2,
    "India": 70.1,
}
_BUILTIN_YEAR = 2021


class CountryLifeExpectancy(BaseModel):
    """One row of the life-expectancy table."""

    model_config = ConfigDict(frozen=True)

    country: str
    life_expectancy: float
    year: Optional[int] = None

    @field_validator("life_expectancy")
    @classmethod
    def expectancy_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("life_expectancy must be >= 0")
        return v


class LifeExpectancyTable:
    """Case-insensitive country -> life expectancy table with a fallback."""

    def __init__(
        self,
        records: Iterable[CountryLifeExpectancy],
        default_country: str = DEFAULT_COUNTRY,
        fallback_years: float = FALLBACK_YEARS,
    ):
        self._records: Dict[str, CountryLifeExpectancy] = {
            r.country.casefold(): r for r in records
        }
        # Picklist catch-all for countries not in the table
        self._records.setdefault(
            OTHER_COUNTRY.casefold(),
            CountryLifeExpectancy(country=OTHER_COUNTRY, life_expectancy=fallback_years),
        )
        self.default_country = default_country
        self.fallback_years = fallback_years

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, country: str) -> bool:
        return country.casefold() in self._records

    def lookup(self, country: Optional[str]) -> float:
        """Life expectancy for a country, or the fallback for unknown ones."""
        if not country:
            return self.default_expectancy()
        record = self._records.get(country.strip().casefold())
        if record is None:
            logger.debug(
                "Unknown country %r, using fallback %s", country, self.fallback_years
            )
            return self.fallback_years
        return record.life_expectancy

    def default_expectancy(self) -> float:
        if not self.default_country:
            return self.fallback_years
        return self.lookup(self.default_country)

    def records(self) -> List[CountryLifeExpectancy]:
        """All rows sorted by country name, with "Other" last."""
        return sorted(
            self._records.values(),
            key=lambda r: (r.country.casefold() == OTHER_COUNTRY.casefold(), r.country),
        )

    def search(self, query: str = "") -> List[CountryLifeExpectancy]:
        """Rows whose country name contains ``query`` (case-insensitive)."""
        needle = query.strip().casefold()
        return [r for r in self.records() if needle in r.country.casefold()]


def _parse_countries(raw: Any) -> List[CountryLifeExpectancy]:
    """Accept either a list of records or a ``{country: years}`` mapping."""
    if isinstance(raw, dict):
        return [
            CountryLifeExpectancy(country=name, life_expectancy=years)
            for name, years in raw.items()
        ]
    return [CountryLifeExpectancy(**row) for row in raw]


def builtin_records() -> List[CountryLifeExpectancy]:
    return [
        CountryLifeExpectancy(country=name, life_expectancy=years, year=_BUILTIN_YEAR)
        for name, years in _BUILTIN_COUNTRIES.items()
    ]


def load_life_expectancy_table() -> LifeExpectancyTable:
    """Build the table from YAML defaults, falling back to built-in data."""
    raw = get_config_value("life_expectancy.countries")
    if raw:
        records = _parse_countries(raw)
        logger.info("Loaded %d life expectancy rows from config", len(records))
    else:
        records = builtin_records()

    return LifeExpectancyTable(
        records,
        default_country=get_config_value(
            "life_expectancy.default_country", DEFAULT_COUNTRY
        ),
        fallback_years=float(
            get_config_value("life_expectancy.fallback_years", FALLBACK_YEARS)
        ),
    )
