"""Population-relative rates."""

from case_aggregator.application.services.staging import StagingArea, StagingHierarchy

PER_POPULATION = 100_000


def rate_per_100k(total: int, population: int) -> float:
    """Rate per 100k inhabitants. Zero population yields 0.0."""
    if population <= 0:
        return 0.0
    return total / population * PER_POPULATION


class RateNormalizer:
    """Derives rates once all totals are final."""

    def normalize(self, hierarchy: StagingHierarchy) -> None:
        for area in hierarchy.areas():
            self._normalize_area(area)

    @staticmethod
    def _normalize_area(area: StagingArea) -> None:
        area.rates = {
            case_state_id: rate_per_100k(total, area.population)
            for case_state_id, total in area.totals.items()
        }
