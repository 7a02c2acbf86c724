# Overview: Service-layer operations for documents; upload validation, disk storage, download and delete.

"""
Document Upload Pipeline

Accepted files:
- declared MIME type is exactly the .xlsx or .docx OOXML type
- filename extension is xlsx/docx and agrees with the MIME type
- size is at most MAX_UPLOAD_BYTES (10 MiB)

Files are written under UPLOAD_FOLDER with a generated
"<epochMillis>-<uuid4>.<ext>" name; the client filename is kept only as
metadata and used as the attachment name on download. A rejected upload
leaves neither a record nor a file behind.
"""

from __future__ import annotations

import os
import time
import uuid

from flask import current_app

from ..errors import ForbiddenError, NotFoundError, ServiceError, ValidationError
from ..models import Document
from ..storage import get_repository
from . import communications_service


XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# Extension -> the one MIME type it must be declared with
ALLOWED_TYPES = {
    "xlsx": XLSX_MIME,
    "docx": DOCX_MIME,
}

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
CHUNK_SIZE = 64 * 1024


class UploadRejectedError(ValidationError):
    """Upload failed type or size checks."""
    pass


class DocumentDeleteError(ServiceError):
    """Metadata removal failed after the file was handled."""

    status_code = 500


def upload_folder() -> str:
    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    return folder


def _max_upload_bytes() -> int:
    return int(current_app.config.get("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES))


def file_extension(filename: str) -> str:
    _, ext = os.path.splitext(filename or "")
    return ext[1:].lower()


def validate_upload(filename: str, mimetype: str | None) -> str:
    """
    Check the declared MIME type and the filename extension.

    Returns the document type ("xlsx" or "docx").
    Raises UploadRejectedError when either check fails or they disagree.
    """
    if mimetype not in ALLOWED_TYPES.values():
        raise UploadRejectedError("Only .xlsx and .docx files are allowed")

    doc_type = file_extension(filename)
    if doc_type not in ALLOWED_TYPES:
        raise UploadRejectedError("Invalid file type. Only .xlsx and .docx files are allowed")

    if ALLOWED_TYPES[doc_type] != mimetype:
        raise UploadRejectedError("File extension does not match its content type")

    return doc_type


def generate_storage_name(doc_type: str) -> str:
    return f"{int(time.time() * 1000)}-{uuid.uuid4()}.{doc_type}"


def _remove_quietly(path: str) -> None:
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError:
        current_app.logger.exception("Failed to remove file %s", path)


def _write_limited(stream, path: str, limit: int) -> int:
    """
    Copy stream to path, stopping as soon as more than limit bytes arrive.

    Returns the byte count. On any failure the partial file is removed.
    """
    written = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > limit:
                    raise UploadRejectedError(
                        f"File too large. Maximum size is {limit // (1024 * 1024)} MB"
                    )
                out.write(chunk)
    except Exception:
        _remove_quietly(path)
        raise
    return written


def upload_document(ctx, file_storage) -> Document:
    """
    Validate and persist one uploaded file for the caller.

    file_storage is a werkzeug FileStorage (request.files["document"]).
    """
    if file_storage is None or not file_storage.filename:
        raise UploadRejectedError("No file uploaded")

    original_name = os.path.basename(file_storage.filename.replace("\\", "/"))
    doc_type = validate_upload(original_name, file_storage.mimetype)

    path = os.path.join(upload_folder(), generate_storage_name(doc_type))
    size = _write_limited(file_storage.stream, path, _max_upload_bytes())

    try:
        document = get_repository().create_document(
            user_id=ctx.user.id,
            name=original_name,
            type=doc_type,
            path=path,
            size=size,
        )
    except Exception:
        _remove_quietly(path)
        raise

    current_app.logger.info("User %s uploaded document %s (%d bytes)", ctx.user.id, document.id, size)
    communications_service.record(ctx.user.id, "Document Upload", f"Uploaded document: {document.name}")
    return document


def list_documents(ctx) -> list[Document]:
    return get_repository().list_documents_by_user(ctx.user.id)


def get_owned_document(ctx, document_id: int, action: str = "access") -> Document:
    """NotFoundError for unknown ids, ForbiddenError for other users' documents."""
    document = get_repository().get_document(document_id)
    if document is None:
        raise NotFoundError("Document not found")
    if document.user_id != ctx.user.id:
        raise ForbiddenError(f"Forbidden: You don't have permission to {action} this document")
    return document


def download_document(ctx, document_id: int) -> tuple[Document, str]:
    """
    Resolve a document for download.

    Returns (document, absolute_path). Records a download activity.
    """
    document = get_owned_document(ctx, document_id, "download")
    if not os.path.isfile(document.path):
        raise NotFoundError("File not found on server")

    communications_service.record(ctx.user.id, "Document Download", f"Downloaded document: {document.name}")
    return document, os.path.abspath(document.path)


def delete_document(ctx, document_id: int) -> None:
    """
    Remove the file (best-effort) and then the metadata record.

    The activity is only recorded if the metadata removal succeeded.
    """
    document = get_owned_document(ctx, document_id, "delete")
    name = document.name
    path = document.path

    _remove_quietly(path)

    if not get_repository().delete_document(document_id):
        raise DocumentDeleteError("Failed to delete document")

    communications_service.record(ctx.user.id, "Document Delete", f"Deleted document: {name}")
