# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles image uploads (costume photos, location shots, avatars) to
# Supabase Storage and keeps the `files` metadata table in sync.
#
# Object path: {team_id}/{user_id}/{epoch_ms}-{random}.{ext}
# =============================================================================

import logging
import secrets
import time
from typing import Any

from lib.supabase_client import SupabaseClient, SupabaseClientError
from app.config import settings
from app.exceptions import (
    BadRequestError,
    FileTooLargeError,
    InvalidFileTypeError,
    StorageUploadError,
    UploadedFileNotFoundError,
)

logger = logging.getLogger(__name__)

TABLE = "files"

# Extension used when the original filename has none
_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def build_storage_path(team_id: str, user_id: str, filename: str | None, content_type: str) -> str:
    """
    Unique object path for an upload.

    Example:
        build_storage_path("t1", "u1", "cos.PNG", "image/png")
        -> "t1/u1/1718000000000-k3j9x2.png"
    """
    ext = ""
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
    ext = ext or _EXTENSIONS.get(content_type, "bin")
    suffix = secrets.token_hex(4)
    return f"{team_id}/{user_id}/{int(time.time() * 1000)}-{suffix}.{ext}"


def file_to_response(row: dict[str, Any]) -> dict[str, Any]:
    """Shape a files row for the client."""
    return {
        "id": row["id"],
        "filename": row.get("filename"),
        "url": row.get("public_url"),
        "type": row.get("file_type"),
        "size": row.get("file_size"),
        "uploaded_at": row.get("created_at"),
        "uploaded_by": row.get("uploaded_by"),
    }


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles validating, uploading and deleting team images.
    """

    @staticmethod
    def validate_upload(content_type: str | None, size: int) -> None:
        """
        Raises:
            InvalidFileTypeError: Not one of ALLOWED_IMAGE_TYPES
            FileTooLargeError: Larger than MAX_UPLOAD_SIZE_MB
        """
        allowed = settings.allowed_image_types_list
        if (content_type or "").lower() not in allowed:
            raise InvalidFileTypeError(content_type, allowed)

        if size > settings.max_upload_size_bytes:
            raise FileTooLargeError(size / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    @staticmethod
    def upload_image(
        team_id: str,
        user_id: str,
        filename: str | None,
        content_type: str | None,
        content: bytes,
    ) -> dict[str, Any]:
        """
        Validate, store and record an uploaded image.

        If the metadata insert fails the stored object is removed again.

        Returns:
            {id, filename, url, type, size}

        Raises:
            BadRequestError: Empty file
            InvalidFileTypeError / FileTooLargeError: Validation failed
            StorageUploadError: Storage rejected the object
        """
        if not content:
            raise BadRequestError("No file provided", code="NO_FILE")

        StorageService.validate_upload(content_type, len(content))
        content_type = (content_type or "").lower()

        client = SupabaseClient.get_client()
        bucket = client.storage.from_(settings.STORAGE_BUCKET)
        path = build_storage_path(team_id, str(user_id), filename, content_type)

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "cache-control": "3600", "upsert": "false"}
            )
            logger.info(f"Uploaded file to storage: {path}")
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        public_url = bucket.get_public_url(path)

        try:
            record = SupabaseClient.insert_row(TABLE, {
                "team_id": team_id,
                "uploaded_by": str(user_id),
                "filename": filename or path.rsplit("/", 1)[-1],
                "storage_path": path,
                "public_url": public_url,
                "file_type": content_type,
                "file_size": len(content),
            })
        except SupabaseClientError:
            logger.error(f"Failed to save metadata for {path}, removing object")
            try:
                bucket.remove([path])
            except Exception as cleanup_error:
                logger.warning(f"Could not remove orphaned object {path}: {cleanup_error}")
            raise

        return {
            "id": record["id"],
            "filename": record.get("filename"),
            "url": public_url,
            "type": content_type,
            "size": len(content),
        }

    @staticmethod
    def list_files(team_id: str) -> list[dict[str, Any]]:
        """The team's uploads, newest first."""
        rows = SupabaseClient.fetch_many(TABLE, {"team_id": team_id}, order_by="created_at", desc=True)
        return [file_to_response(row) for row in rows]

    @staticmethod
    def delete_file(team_id: str, file_id: str) -> None:
        """
        Remove the stored object and its metadata row.

        Raises:
            UploadedFileNotFoundError: If the file isn't in the team
        """
        record = SupabaseClient.fetch_one(TABLE, {"id": file_id, "team_id": team_id})
        if not record:
            raise UploadedFileNotFoundError(file_id)

        client = SupabaseClient.get_client()
        try:
            client.storage.from_(settings.STORAGE_BUCKET).remove([record["storage_path"]])
        except Exception as e:
            # Row is still removed so the UI doesn't keep showing a broken image
            logger.warning(f"Failed to remove object {record['storage_path']}: {e}")

        SupabaseClient.delete_rows(TABLE, {"id": file_id, "team_id": team_id})
        logger.info(f"Deleted file {file_id} from team {team_id}")
