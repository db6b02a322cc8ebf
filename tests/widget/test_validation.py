"""
tests/widget/test_validation.py

Tests for the widget's file checks and size formatter.

Pure unit tests — no HTTP, no disk.
"""

import pytest

from app.core.constants import MAX_FILE_SIZE_BYTES, MSG_DISALLOWED_TYPE, MSG_TOO_LARGE
from app.core.exceptions import FileValidationError
from app.models.upload_models import DocumentCategory
from app.widget.state import CandidateFile
from app.widget.validation import format_file_size, validate_file


def _file(name: str, size: int = 10, mime_type: str = "") -> CandidateFile:
    return CandidateFile(name=name, content=b"\0" * size, mime_type=mime_type)


class TestValidateFile:

    def test_pdf_becomes_invoice(self) -> None:
        selected = validate_file(_file("invoice.pdf", mime_type="application/pdf"))

        assert selected.category is DocumentCategory.INVOICE
        assert selected.name == "invoice.pdf"
        assert selected.size == 10
        assert selected.mime_type == "application/pdf"

    def test_xlsx_becomes_receipt_note(self) -> None:
        assert validate_file(_file("stock.xlsx")).category is DocumentCategory.RECEIPT_NOTE

    @pytest.mark.parametrize("name", ["notes.txt", "old.xls", "README", "photo.jpeg"])
    def test_other_extensions_are_rejected(self, name: str) -> None:
        with pytest.raises(FileValidationError, match=MSG_DISALLOWED_TYPE):
            validate_file(_file(name))

    def test_exact_ceiling_is_accepted(self) -> None:
        selected = validate_file(_file("big.pdf", size=MAX_FILE_SIZE_BYTES))
        assert selected.size == 15 * 1024 * 1024

    @pytest.mark.parametrize("name", ["big.pdf", "big.xlsx"])
    def test_one_byte_over_is_rejected(self, name: str) -> None:
        with pytest.raises(FileValidationError, match=MSG_TOO_LARGE):
            validate_file(_file(name, size=MAX_FILE_SIZE_BYTES + 1))

    def test_type_is_checked_before_size(self) -> None:
        with pytest.raises(FileValidationError, match=MSG_DISALLOWED_TYPE):
            validate_file(_file("big.docx", size=MAX_FILE_SIZE_BYTES + 1))

    def test_missing_mime_type_is_guessed(self) -> None:
        assert validate_file(_file("scan.pdf")).mime_type == "application/pdf"


class TestFormatFileSize:

    @pytest.mark.parametrize(
        "num_bytes, expected",
        [
            (0, "0 Bytes"),
            (512, "512 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (2 * 1024 * 1024, "2 MB"),
            (15 * 1024 * 1024, "15 MB"),
            (3 * 1024 ** 3, "3 GB"),
        ],
    )
    def test_formatting(self, num_bytes: int, expected: str) -> None:
        assert format_file_size(num_bytes) == expected
