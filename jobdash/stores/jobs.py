"""
JobDash - Job application store.

Cache of the signed-in user's job applications. Loaded automatically when
a session starts and cleared when it ends. Every create/update replaces
the local entry with the server's canonical copy; nothing is inserted
optimistically.
"""
from typing import Any, Dict, List, Union

from ..schemas import JobApplication, JobApplicationCreate, JobApplicationUpdate
from .base import CollectionStore, build_input


class JobStore(CollectionStore[JobApplication]):
    name = "jobs"
    autoload = True
    model = JobApplication
    path = "/jobs"
    list_error = "Failed to load your job applications"
    not_found_message = "Job not found"

    @property
    def jobs(self) -> List[JobApplication]:
        return self.cache

    async def create(self, fields: Union[JobApplicationCreate, Dict[str, Any]]) -> JobApplication:
        """
        Create a job application.

        Args:
            fields: JobApplicationCreate or a dict of its fields (snake_case or camelCase)

        Returns:
            The server's representation, now also in the cache
        """
        job = build_input(JobApplicationCreate, fields)
        return await self._execute(
            lambda token: self.api.post(
                self.path, token=token, json=job.to_payload(), default_message="Failed to add job"
            ),
            self._parse_one,
            self._upsert,
            error_title="Error adding job",
            success=lambda created: (
                "Job added", f"Application for {created.role} at {created.company} added successfully!"
            ),
        )

    async def update(self, job_id: str, fields: Union[JobApplicationUpdate, Dict[str, Any]]) -> JobApplication:
        """
        Update some fields of a job application.

        Only the given fields are sent. The last update issued wins.
        """
        changes = build_input(JobApplicationUpdate, fields)
        return await self._execute(
            lambda token: self.api.put(
                f"{self.path}/{job_id}",
                token=token,
                json=changes.to_payload(partial=True),
                default_message="Failed to update job",
            ),
            self._parse_one,
            self._upsert,
            error_title="Error updating job",
            success=lambda updated: ("Job updated", f"Application for {updated.role} updated successfully!"),
        )

    async def delete(self, job_id: str) -> None:
        """Delete a cached job; removed locally only after the server confirms."""
        job = await self._require_cached(job_id, "Error deleting job")
        await self._execute(
            lambda token: self.api.delete(
                f"{self.path}/{job_id}", token=token, default_message="Failed to delete job"
            ),
            lambda data: job_id,
            self._discard,
            error_title="Error deleting job",
            success=lambda _: ("Job deleted", f"Application for {job.role} at {job.company} deleted successfully!"),
        )
