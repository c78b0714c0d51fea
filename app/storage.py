"""
Document store for files attached to appointments.

Files go to Cloudflare R2 when R2 credentials are configured, otherwise to a
local directory that the app serves under /uploads. Only the returned
reference ({filename, path, uploadedAt}) is persisted on the appointment.
"""

import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from .config import (
    MAX_UPLOAD_SIZE_MB,
    R2_ACCESS_KEY_ID,
    R2_ACCOUNT_ID,
    R2_BUCKET_NAME,
    R2_SECRET_ACCESS_KEY,
    UPLOAD_DIR,
)
from .errors import Internal, ValidationError
from .models import utcnow

logger = logging.getLogger(__name__)

ALLOWED_DOCUMENT_TYPES = {
    "application/pdf": (".pdf",),
    "image/png": (".png",),
    "image/jpeg": (".jpg", ".jpeg"),
    "image/jpg": (".jpg", ".jpeg"),
    "image/webp": (".webp",),
    "image/heic": (".heic",),
}

DANGEROUS_FILENAME_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]

DOCUMENT_PREFIX = "appointments"


@dataclass
class DocumentUpload:
    """An uploaded file read into memory, ready for validation and storage"""

    filename: str
    content_type: Optional[str]
    content: bytes


def r2_enabled() -> bool:
    return bool(R2_ACCOUNT_ID and R2_ACCESS_KEY_ID and R2_SECRET_ACCESS_KEY)


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def validate_document(upload: DocumentUpload) -> None:
    """Reject anything that is not a reasonably named, size-capped PDF or image"""
    filename = upload.filename or ""
    if not filename:
        raise ValidationError("Uploaded document has no filename")

    for char in DANGEROUS_FILENAME_CHARS:
        if char in filename:
            logger.warning(f"❌ Dangerous character '{char}' detected in filename: '{filename}'")
            raise ValidationError(f"Invalid filename - contains dangerous character '{char}'")

    if len(filename) > 255:
        raise ValidationError("Filename too long - maximum 255 characters")

    extensions = ALLOWED_DOCUMENT_TYPES.get((upload.content_type or "").lower())
    if not extensions or not filename.lower().endswith(extensions):
        raise ValidationError("Invalid file type. Only PDF and image files are allowed.")

    max_bytes = MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if len(upload.content) > max_bytes:
        raise ValidationError(
            f"File size exceeds {MAX_UPLOAD_SIZE_MB}MB limit. "
            f"Your file is {len(upload.content) / (1024 * 1024):.2f}MB."
        )


def store_document(upload: DocumentUpload) -> dict:
    """Persist one validated document and return its reference"""
    ext = os.path.splitext(upload.filename)[1].lower()
    key = f"{DOCUMENT_PREFIX}/{uuid.uuid4()}{ext}"

    try:
        if r2_enabled():
            get_r2_client().put_object(
                Bucket=R2_BUCKET_NAME,
                Key=key,
                Body=upload.content,
                ContentType=upload.content_type,
            )
            path = key
        else:
            target = os.path.join(UPLOAD_DIR, key)
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, "wb") as f:
                f.write(upload.content)
            path = f"/uploads/{key}"
    except Exception as e:
        logger.error(f"❌ Document upload failed for '{upload.filename}': {e}")
        raise Internal("Document upload failed") from e

    logger.info(f"📤 Stored document '{upload.filename}' at {path}")
    return {"filename": upload.filename, "path": path, "uploadedAt": utcnow().isoformat()}


def delete_document(reference: dict) -> bool:
    """Remove a stored document. Returns False if it could not be removed."""
    path = reference.get("path") or ""
    try:
        if path.startswith("/uploads/"):
            os.remove(os.path.join(UPLOAD_DIR, path.removeprefix("/uploads/")))
        elif r2_enabled():
            get_r2_client().delete_object(Bucket=R2_BUCKET_NAME, Key=path)
        else:
            return False
    except (ClientError, OSError) as e:
        logger.error(f"❌ Failed to delete document {path}: {e}")
        return False

    logger.info(f"🗑️ Deleted document {path}")
    return True
