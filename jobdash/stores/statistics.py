"""
JobDash - Statistics store.

Read-only, server-computed aggregate. Each fetch replaces the cached value
wholesale; a reset puts back the all-zero default.
"""
from ..schemas import Statistics
from .base import ResourceStore, parse_response


class StatisticsStore(ResourceStore[Statistics]):
    name = "statistics"

    def _initial(self) -> Statistics:
        return Statistics()

    @property
    def statistics(self) -> Statistics:
        return self.cache

    def _replace(self, statistics: Statistics) -> None:
        self.cache = statistics

    async def fetch(self) -> Statistics:
        # null body counts as "no data yet"
        return await self._execute(
            lambda token: self.api.get("/statistics", token=token, default_message="Failed to fetch statistics"),
            lambda data: parse_response(Statistics, data if data is not None else {}),
            self._replace,
            error_title="Error loading statistics",
        )

    async def refresh(self) -> Statistics:
        return await self.fetch()
