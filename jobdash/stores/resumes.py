"""
JobDash - Resume store.

Metadata cache for the user's resumes. The PDF bytes only pass through
the client: base64-encoded on upload, streamed straight to disk on
download.
"""
from pathlib import Path
from typing import List, Optional, Union

import aiofiles

from ..config import settings
from ..errors import FileEncodingError, JobDashError
from ..schemas import Resume, ResumeUpload
from ..services.encoding import ResumeFile, encode_file, validate_resume_file
from .base import CollectionStore, build_input


def unique_destination(directory: Path, filename: str) -> Path:
    """
    Pick a path in `directory` that doesn't exist yet.

    Only the final path component of `filename` is used, so a server-side
    name can never escape the download directory.
    """
    name = Path(filename).name or "resume.pdf"
    candidate = directory / name
    stem, suffix = Path(name).stem, Path(name).suffix
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem} ({counter}){suffix}"
        counter += 1
    return candidate


class ResumeStore(CollectionStore[Resume]):
    name = "resumes"
    autoload = True
    model = Resume
    path = "/resumes"
    list_error = "Failed to load your resume files"
    not_found_message = "Resume not found"

    def __init__(self, *args, download_dir: Optional[Path] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.download_dir = Path(download_dir or settings.storage.download_dir)

    @property
    def resumes(self) -> List[Resume]:
        return self.cache

    async def upload(self, name: str, file: Optional[Union[ResumeFile, str, Path]]) -> Resume:
        """
        Upload a PDF resume.

        Args:
            name: Display name for the resume
            file: ResumeFile, or a path to read

        Raises:
            MissingFileError, InvalidFileTypeError, FileTooLargeError:
                Rejected locally, nothing is sent
            FileEncodingError: File could not be read or encoded
        """
        if isinstance(file, (str, Path)):
            file = ResumeFile.from_path(file)
        validate_resume_file(file)
        body = build_input(ResumeUpload, {"name": name, "file_name": file.filename, "file_data": encode_file(file)})

        return await self._execute(
            lambda token: self.api.post(
                self.path, token=token, json=body.to_payload(), default_message="Failed to add resume"
            ),
            self._parse_one,
            self._upsert,
            error_title="Error adding resume",
            success=lambda created: ("Resume added", f"{created.name} added successfully!"),
        )

    async def delete(self, resume_id: str) -> None:
        """Delete a cached resume; unknown ids fail locally without a request."""
        resume = await self._require_cached(resume_id, "Error deleting resume")
        await self._execute(
            lambda token: self.api.delete(
                f"{self.path}/{resume_id}", token=token, default_message="Failed to delete resume"
            ),
            lambda data: resume_id,
            self._discard,
            error_title="Error deleting resume",
            success=lambda _: ("Resume deleted", f"{resume.name} deleted successfully!"),
        )

    async def download(self, resume_id: str, directory: Optional[Path] = None) -> Path:
        """
        Save a resume under its original filename.

        The response body is streamed to disk chunk by chunk and the
        connection is released as soon as the file is written. A partial
        file is removed if the transfer fails.

        Returns:
            Path of the saved file
        """
        resume = await self._require_cached(resume_id, "Error downloading resume")
        target_dir = Path(directory or self.download_dir)

        async def fetch(token: str) -> Path:
            try:
                target_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileEncodingError(f"Could not create {target_dir}: {e.strerror or e}") from e
            destination = unique_destination(target_dir, resume.original_name)
            try:
                async with self.api.stream(
                    f"{self.path}/{resume_id}/download", token=token, default_message="Failed to download resume"
                ) as response:
                    async with aiofiles.open(destination, "wb") as out:
                        async for chunk in response.aiter_bytes():
                            await out.write(chunk)
            except JobDashError:
                destination.unlink(missing_ok=True)
                raise
            except OSError as e:
                destination.unlink(missing_ok=True)
                raise FileEncodingError(f"Could not save {destination.name}: {e.strerror or e}") from e
            return destination

        saved = await self._execute(
            fetch,
            lambda path: path,
            error_title="Error downloading resume",
            success=lambda path: ("Download complete", f"{resume.name} saved to {path}"),
        )
        self.logger.info(f"Saved resume {resume_id} to {saved}")
        return saved
