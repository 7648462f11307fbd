from __future__ import annotations

import io
import mimetypes
import uuid
from typing import BinaryIO, Optional, Tuple, Union

from asana_client.client import AsanaClient
from asana_client.envelope import decode_record
from asana_client.errors import AsanaParseError, AsanaValidationError
from asana_client.models import Attachment, AttachmentUpload, require_non_empty
from asana_client.pagination import PageStream

SNIFF_BYTES = 512
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Leading-byte signatures checked when the file name gives no hint.
_SIGNATURES: Tuple[Tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"%PDF-", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
)


def _sniff(head: bytes) -> Optional[str]:
    for signature, content_type in _SIGNATURES:
        if head.startswith(signature):
            return content_type
    if head:
        try:
            head.decode("utf-8")
        except UnicodeDecodeError:
            return None
        return "text/plain; charset=utf-8"
    return None


def detect_content_type(
    body: Union[bytes, BinaryIO], filename: Optional[str] = None
) -> Tuple[str, BinaryIO]:
    """
    Guess the content type from the file name, then from the leading bytes.
    Returns the type plus a reader positioned at the start of the content.
    """
    reader: BinaryIO = io.BytesIO(body) if isinstance(body, bytes) else body

    guessed = mimetypes.guess_type(filename)[0] if filename else None
    if guessed:
        return guessed, reader

    head = reader.read(SNIFF_BYTES)
    if not head:
        raise AsanaValidationError("attachment body is empty")
    try:
        reader.seek(-len(head), io.SEEK_CUR)
    except (OSError, ValueError):
        # Not seekable: stitch the sniffed bytes back in front.
        reader = io.BytesIO(head + reader.read())
    return _sniff(head) or DEFAULT_CONTENT_TYPE, reader


def _non_blank_filename(upload: AttachmentUpload) -> str:
    name = (upload.name or "").strip()
    return name or uuid.uuid4().hex


async def upload_attachment(
    client: AsanaClient, upload: AttachmentUpload
) -> Attachment:
    """
    Upload a file and attach it to ``upload.task_id``.
    Multipart parts: ``file`` (the content) and ``name`` (a plain form field).
    """
    if upload is None:
        raise AsanaValidationError("expecting a non-nil body")
    upload.validate_request()
    task_id = upload.task_id.strip()

    filename = _non_blank_filename(upload)
    content_type, reader = detect_content_type(upload.body, filename)

    body = await client.post(
        f"/tasks/{task_id}/attachments",
        files={"file": (filename, reader, content_type)},
        data={"name": upload.name or filename},
        resource="attachments",
    )
    attachment = decode_record(body, Attachment)
    if attachment is None:
        raise AsanaParseError("no attachment was received")
    return attachment


async def find_attachment_by_id(client: AsanaClient, attachment_id: str) -> Attachment:
    attachment_id = require_non_empty(attachment_id, "attachmentID")
    body = await client.get(f"/attachments/{attachment_id}", resource="attachments")
    attachment = decode_record(body, Attachment)
    if attachment is None:
        raise AsanaParseError("no attachment was received")
    return attachment


def list_attachments_for_task(
    client: AsanaClient, task_id: str
) -> PageStream[Attachment]:
    task_id = require_non_empty(task_id, "taskID")
    return client.paginate(
        Attachment, f"/tasks/{task_id}/attachments", resource="attachments"
    )
