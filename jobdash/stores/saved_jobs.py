"""JobDash - Saved job listings (bookmarks of external postings)."""
from typing import Any, Dict, List, Union

from ..schemas import SavedJob, SavedJobCreate
from .base import CollectionStore, build_input


class SavedJobStore(CollectionStore[SavedJob]):
    name = "saved_jobs"
    model = SavedJob
    path = "/saved-jobs"
    list_error = "Failed to fetch saved jobs"
    not_found_message = "Saved job not found"

    @property
    def saved_jobs(self) -> List[SavedJob]:
        return self.cache

    async def save(self, fields: Union[SavedJobCreate, Dict[str, Any]]) -> SavedJob:
        job = build_input(SavedJobCreate, fields)
        return await self._execute(
            lambda token: self.api.post(
                self.path, token=token, json=job.to_payload(), default_message="Failed to save job"
            ),
            self._parse_one,
            self._upsert,
            error_title="Error saving job",
            success=lambda saved: ("Job saved", f"{saved.title} at {saved.company} saved"),
        )

    async def remove(self, saved_job_id: str) -> None:
        await self._execute(
            lambda token: self.api.delete(
                f"{self.path}/{saved_job_id}", token=token, default_message="Failed to remove saved job"
            ),
            lambda data: saved_job_id,
            self._discard,
            error_title="Error removing saved job",
            success=lambda _: ("Job removed", "Saved job removed"),
        )
