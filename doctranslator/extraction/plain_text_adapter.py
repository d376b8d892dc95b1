from doctranslator.extraction.base import BaseTextExtractor
from doctranslator.extraction.models import UploadedFile


class PlainTextAdapter(BaseTextExtractor):
    """Passes text files through, decoding them as UTF-8."""

    def extract(self, file: UploadedFile) -> str:
        return file.content.decode("utf-8", errors="replace").strip()
