"""
Tests for attachment handling

Tests cover:
- Content type checks
- The per-attachment byte bound
- Download response headers
"""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.errors import InvalidArgument
from app.services.attachments import (
    IMAGE_CONTENT_TYPES,
    PDF_CONTENT_TYPES,
    Attachment,
    attachment_response,
    read_optional_upload,
    read_upload,
)


def make_upload(data: bytes, filename: str = "cv.pdf", content_type: str = "application/pdf") -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestReadUpload:
    """Reading uploads into attachments."""

    @pytest.mark.asyncio
    async def test_reads_pdf(self):
        attachment = await read_upload(make_upload(b"%PDF-1.4"), PDF_CONTENT_TYPES)

        assert attachment.data == b"%PDF-1.4"
        assert attachment.content_type == "application/pdf"
        assert attachment.filename == "cv.pdf"
        assert attachment.size == 8

    @pytest.mark.asyncio
    async def test_rejects_wrong_type(self):
        upload = make_upload(b"GIF89a", filename="cat.gif", content_type="image/gif")

        with pytest.raises(InvalidArgument):
            await read_upload(upload, PDF_CONTENT_TYPES)

    @pytest.mark.asyncio
    async def test_accepts_image_types(self):
        upload = make_upload(b"\x89PNG", filename="me.png", content_type="image/png")

        attachment = await read_upload(upload, IMAGE_CONTENT_TYPES)

        assert attachment.content_type == "image/png"

    @pytest.mark.asyncio
    async def test_rejects_oversized(self):
        upload = make_upload(b"x" * 1025)

        with pytest.raises(InvalidArgument):
            await read_upload(upload, PDF_CONTENT_TYPES, max_bytes=1024)

    @pytest.mark.asyncio
    async def test_exact_limit_allowed(self):
        attachment = await read_upload(make_upload(b"x" * 1024), PDF_CONTENT_TYPES, max_bytes=1024)

        assert attachment.size == 1024

    @pytest.mark.asyncio
    async def test_blank_file_input_is_none(self):
        assert await read_optional_upload(None) is None
        assert await read_optional_upload(make_upload(b"", filename="")) is None


class TestAttachmentResponse:
    """Binary download headers."""

    def test_attachment_disposition(self):
        response = attachment_response(
            Attachment(data=b"%PDF", content_type="application/pdf", filename="resume.pdf")
        )

        assert response.headers["content-disposition"] == 'attachment; filename="resume.pdf"'
        assert response.headers["content-type"] == "application/pdf"
        assert response.body == b"%PDF"
