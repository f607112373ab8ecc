"""
Attachment handling - named binary blobs (resumes, company documents, images)

Uploads are read in chunks and rejected as soon as they exceed the
configured size bound, so an oversized file is never fully buffered.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import UploadFile
from fastapi.responses import Response

from app.config import get_settings
from app.errors import InvalidArgument

settings = get_settings()

CHUNK_SIZE = 64 * 1024

PDF_CONTENT_TYPES = frozenset({"application/pdf"})
IMAGE_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


@dataclass(frozen=True)
class Attachment:
    data: bytes
    content_type: str
    filename: str

    @property
    def size(self) -> int:
        return len(self.data)


async def read_upload(
    upload: UploadFile,
    allowed_types: Optional[Iterable[str]] = None,
    max_bytes: Optional[int] = None,
) -> Attachment:
    """Read an uploaded file into an Attachment, enforcing type and size."""
    max_bytes = max_bytes or settings.max_attachment_bytes
    content_type = upload.content_type or "application/octet-stream"
    filename = upload.filename or "upload"

    if allowed_types is not None and content_type not in allowed_types:
        raise InvalidArgument(
            f"Unsupported file type: {content_type}",
            allowedTypes=sorted(allowed_types),
        )

    chunks = []
    total = 0
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise InvalidArgument(f"File {filename} exceeds the {max_bytes} byte limit")
        chunks.append(chunk)

    return Attachment(data=b"".join(chunks), content_type=content_type, filename=filename)


async def read_optional_upload(
    upload: Optional[UploadFile],
    allowed_types: Optional[Iterable[str]] = None,
) -> Optional[Attachment]:
    # Browsers submit an empty part when a file input is left blank
    if upload is None or not upload.filename:
        return None
    return await read_upload(upload, allowed_types)


def attachment_response(attachment: Attachment) -> Response:
    filename = attachment.filename.replace('"', "")
    return Response(
        content=attachment.data,
        media_type=attachment.content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
