"""
JobDash - Resume file handling for upload.

Pure helpers: read a local file into a ResumeFile, check it against the
upload rules, and transcode the bytes to base64 for the JSON body.
Nothing here talks to the network.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import base64
import binascii
import mimetypes

from ..errors import FileEncodingError, FileTooLargeError, InvalidFileTypeError, MissingFileError

ALLOWED_CONTENT_TYPES = {"application/pdf"}
MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB


@dataclass
class ResumeFile:
    """A local document selected for upload."""
    filename: str
    content: bytes
    content_type: Optional[str] = None

    def __post_init__(self):
        if self.content_type is None:
            self.content_type = mimetypes.guess_type(self.filename)[0] or "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Union[str, Path], content_type: Optional[str] = None) -> "ResumeFile":
        """
        Read a file from disk.

        Raises:
            FileEncodingError: If the file cannot be read
        """
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise FileEncodingError(f"Could not read {path.name}: {e.strerror or e}") from e
        return cls(filename=path.name, content=content, content_type=content_type)


def validate_resume_file(file: Optional[ResumeFile]) -> ResumeFile:
    """
    Check presence, type and size, in that order.

    Raises:
        MissingFileError, InvalidFileTypeError, FileTooLargeError
    """
    if file is None or not file.filename:
        raise MissingFileError()
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidFileTypeError()
    if file.size > MAX_FILE_SIZE:
        raise FileTooLargeError()
    return file


def encode_file(file: ResumeFile) -> str:
    """
    Base64-encode file content as ASCII text (no data-URL prefix).

    Raises:
        FileEncodingError: If the content is not bytes-like
    """
    try:
        return base64.b64encode(bytes(file.content)).decode("ascii")
    except (TypeError, ValueError, binascii.Error) as e:
        raise FileEncodingError(f"Could not encode {file.filename}: {e}") from e
