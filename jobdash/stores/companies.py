"""
JobDash - Company store.

Cached list of companies the user tracks, plus a separate, transient
search result set that never touches the cache.
"""
from typing import Any, Dict, List, Union

from ..schemas import Company, CompanyCreate, CompanyUpdate
from .base import CollectionStore, build_input


class CompanyStore(CollectionStore[Company]):
    name = "companies"
    model = Company
    path = "/companies"
    list_error = "Failed to fetch companies"
    not_found_message = "Company not found"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.search_results: List[Company] = []

    @property
    def companies(self) -> List[Company]:
        return self.cache

    def reset(self) -> None:
        super().reset()
        self.search_results = []

    async def search(self, query: str) -> List[Company]:
        """
        Search companies on the server.

        The result is returned and kept in `search_results`; the cached
        company list is not modified. A blank query returns [] without a
        request.
        """
        query = (query or "").strip()
        if not query:
            self.search_results = []
            return []

        def keep(results: List[Company]) -> None:
            self.search_results = results

        return await self._execute(
            lambda token: self.api.get(
                f"{self.path}/search", token=token, params={"q": query}, default_message="Failed to search companies"
            ),
            self._parse_many,
            keep,
            error_title="Error searching companies",
        )

    async def add(self, fields: Union[CompanyCreate, Dict[str, Any]]) -> Company:
        company = build_input(CompanyCreate, fields)
        return await self._execute(
            lambda token: self.api.post(
                self.path, token=token, json=company.to_payload(), default_message="Failed to add company"
            ),
            self._parse_one,
            self._upsert,
            error_title="Error adding company",
            success=lambda created: ("Company added", f"{created.name} added successfully"),
        )

    async def update(self, company_id: str, fields: Union[CompanyUpdate, Dict[str, Any]]) -> Company:
        changes = build_input(CompanyUpdate, fields)
        return await self._execute(
            lambda token: self.api.put(
                f"{self.path}/{company_id}",
                token=token,
                json=changes.to_payload(partial=True),
                default_message="Failed to update company",
            ),
            self._parse_one,
            self._upsert,
            error_title="Error updating company",
            success=lambda updated: ("Company updated", f"{updated.name} updated successfully"),
        )

    async def delete(self, company_id: str) -> None:
        await self._execute(
            lambda token: self.api.delete(
                f"{self.path}/{company_id}", token=token, default_message="Failed to delete company"
            ),
            lambda data: company_id,
            self._discard,
            error_title="Error deleting company",
            success=lambda _: ("Company deleted", "Company deleted successfully"),
        )
