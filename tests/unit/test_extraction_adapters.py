from pathlib import Path
from unittest.mock import patch

import pytest

from doctranslator.extraction.exceptions import ExtractionError
from doctranslator.extraction.models import UploadedFile
from doctranslator.extraction.plain_text_adapter import PlainTextAdapter
from doctranslator.extraction.tesseract_adapter import TesseractOcrAdapter


class TestUploadedFile:
    def test_size_is_content_length(self) -> None:
        file = UploadedFile(name="a.txt", mime_type="text/plain", content=b"12345")
        assert file.size == 5

    def test_from_path_guesses_mime_type(self, tmp_path: Path) -> None:
        path = tmp_path / "scan.png"
        path.write_bytes(b"\x89PNG")
        file = UploadedFile.from_path(path)
        assert file.name == "scan.png"
        assert file.mime_type == "image/png"
        assert file.content == b"\x89PNG"

    def test_from_path_explicit_mime_type_wins(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("hi")
        assert UploadedFile.from_path(path, mime_type="text/markdown").mime_type == "text/markdown"

    def test_from_path_unknown_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "blob.unknownext"
        path.write_bytes(b"x")
        assert UploadedFile.from_path(path).mime_type == "application/octet-stream"


class TestPlainTextAdapter:
    def test_decodes_and_strips(self) -> None:
        file = UploadedFile(name="a.txt", mime_type="text/plain", content="  Hola señor \n".encode())
        assert PlainTextAdapter().extract(file) == "Hola señor"

    def test_invalid_utf8_is_replaced(self) -> None:
        file = UploadedFile(name="a.txt", mime_type="text/plain", content=b"ok \xff")
        assert PlainTextAdapter().extract(file).startswith("ok")


class TestTesseractOcrAdapter:
    def test_passes_language_and_strips(self, sample_png_bytes: bytes) -> None:
        file = UploadedFile(name="scan.png", mime_type="image/png", content=sample_png_bytes)
        with patch(
            "doctranslator.extraction.tesseract_adapter.pytesseract.image_to_string",
            return_value="  Hello world\n",
        ) as mock_ocr:
            result = TesseractOcrAdapter(language="spa").extract(file)

        assert result == "Hello world"
        assert mock_ocr.call_args.kwargs["lang"] == "spa"

    def test_unreadable_image_raises(self) -> None:
        file = UploadedFile(name="broken.png", mime_type="image/png", content=b"nope")
        with pytest.raises(ExtractionError, match="broken.png"):
            TesseractOcrAdapter().extract(file)

    def test_ocr_failure_is_wrapped(self, sample_png_bytes: bytes) -> None:
        file = UploadedFile(name="scan.png", mime_type="image/png", content=sample_png_bytes)
        with patch(
            "doctranslator.extraction.tesseract_adapter.pytesseract.image_to_string",
            side_effect=OSError("tesseract is not installed"),
        ):
            with pytest.raises(ExtractionError, match="OCR failed"):
                TesseractOcrAdapter().extract(file)
