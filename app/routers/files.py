# =============================================================================
# app/routers/files.py - Image Upload Endpoints
# =============================================================================
# Handles image uploads to Supabase Storage for the active team.
# JPEG, PNG, WebP and GIF only, up to MAX_UPLOAD_SIZE_MB.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Path, UploadFile, status

from app.config import settings
from app.dependencies import TeamDep
from app.exceptions import FileTooLargeError
from core.services.storage_service import StorageService
from lib.casing import camel_keys

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_file(
    ctx: TeamDep,
    file: UploadFile = File(..., description="Image file (multipart field 'file')"),
):
    """
    Upload an image.

    Returns {id, filename, url, type, size}.

    Raises:
        400: Not an allowed image type
        413: Larger than the configured limit
    """
    # Read one byte past the limit so oversized uploads fail without
    # buffering the whole file
    content = await file.read(settings.max_upload_size_bytes + 1)
    if len(content) > settings.max_upload_size_bytes:
        raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    result = StorageService.upload_image(
        team_id=ctx.team_id,
        user_id=ctx.user_id,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )
    return camel_keys(result)


@router.get("")
async def list_files(ctx: TeamDep):
    """The team's uploads, newest first."""
    return camel_keys(StorageService.list_files(ctx.team_id))


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(
    file_id: Annotated[UUID, Path(description="File UUID")],
    ctx: TeamDep,
):
    """Delete the stored object and its record."""
    StorageService.delete_file(ctx.team_id, str(file_id))
