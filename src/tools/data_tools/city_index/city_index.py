"""City Index - static in-memory city list for search-box suggestions."""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

BUNDLED_CITIES = Path(__file__).with_name('cities.json')

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 10


@dataclass(frozen=True)
class City:
    name: str
    country: str
    state: str | None = None

    def to_suggestion(self) -> dict:
        return {
            'name': self.name,
            'state': self.state,
            'country': self.country,
            'fullName': f'{self.name}, {self.country}',
        }


class CityIndex:
    """Immutable list of cities searched by case-insensitive substring."""

    def __init__(self, cities: list[City]):
        self._cities = tuple(cities)

    def __len__(self) -> int:
        return len(self._cities)

    @classmethod
    def from_records(cls, records: list[dict]) -> 'CityIndex':
        """Build an index from ``{name, country, state}`` dicts.

        Records without a name or country are skipped; ``admin1`` is accepted
        in place of ``state``.
        """
        cities = []
        for record in records:
            name = record.get('name')
            country = record.get('country')
            if not name or not country:
                continue
            cities.append(City(
                name=name,
                country=country,
                state=record.get('state') or record.get('admin1'),
            ))
        return cls(cities)

    def search(
        self,
        query: str | None,
        country: str = 'US',
        limit: int = MAX_RESULTS,
    ) -> list[dict]:
        """Find cities in one country whose name contains the query.

        Args:
            query: Search text. Fewer than two characters yields no results.
            country: ISO country code to restrict results to.
            limit: Maximum number of results.

        Returns:
            Suggestions with name, state, country and fullName.
        """
        query = (query or '').lower()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        results = []
        for city in self._cities:
            if city.country == country and query in city.name.lower():
                results.append(city.to_suggestion())
                if len(results) >= limit:
                    break
        return results


@lru_cache(maxsize=None)
def load_city_index(path: str | None = None) -> CityIndex:
    """Load a city index from a JSON list, once per path.

    Args:
        path: JSON file to read. Defaults to the bundled cities.json.
    """
    source = Path(path) if path else BUNDLED_CITIES
    with source.open(encoding='utf-8') as f:
        records = json.load(f)
    index = CityIndex.from_records(records)
    logger.info(f'Loaded {len(index)} cities from {source}')
    return index
