import mimetypes
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class UploadedFile:
    """A file picked by the user for translation."""

    name: str
    mime_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: Path, mime_type: str | None = None) -> "UploadedFile":
        """Read a local file, guessing its MIME type from the extension."""
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            mime_type=mime_type or guessed or _DEFAULT_MIME_TYPE,
            content=path.read_bytes(),
        )
