from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from ragtime.errors import RagtimeError

DEFAULT_TEXT_NAME = "text-content.txt"

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".json": "application/json",
    ".csv": "text/csv",
    ".md": "text/markdown",
}


class UploadSourceError(RagtimeError):
    """No usable upload input was given"""


class SourceKind(str, Enum):
    FILE = "file"
    STRING = "string"
    URL = "url"


@dataclass
class UploadSource:
    """Resolved upload input"""
    kind: SourceKind
    value: str
    name: Optional[str] = None

    @property
    def content_type(self) -> str:
        if self.kind == SourceKind.FILE:
            return content_type_for(self.value)
        return "text/plain"


def content_type_for(path: str) -> str:
    return CONTENT_TYPES.get(Path(path).suffix.lower(), "text/plain")


def looks_like_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def resolve_upload_source(
    input_value: Optional[str] = None,
    file: Optional[str] = None,
    string: Optional[str] = None,
    url: Optional[str] = None,
    name: Optional[str] = None,
) -> UploadSource:
    """
    Pick exactly one upload source.

    Precedence: an existing file path (--file or the positional argument),
    then an explicit --string / --url flag, then the positional argument
    classified as URL (http/https prefix) or literal text.
    """
    if file:
        if not Path(file).is_file():
            raise UploadSourceError(f"File not found: {file}")
        return UploadSource(SourceKind.FILE, file, name)
    if input_value and Path(input_value).is_file():
        return UploadSource(SourceKind.FILE, input_value, name)

    if string:
        return UploadSource(SourceKind.STRING, string, name or DEFAULT_TEXT_NAME)
    if url:
        return UploadSource(SourceKind.URL, url, name)

    if input_value:
        if looks_like_url(input_value):
            return UploadSource(SourceKind.URL, input_value, name)
        return UploadSource(SourceKind.STRING, input_value, name or DEFAULT_TEXT_NAME)

    raise UploadSourceError(
        "No input provided. Use --file, --string, --url, or provide a file path/URL/text as argument."
    )
