"""
Image upload endpoint. Stored files are served back under the uploads URL prefix.
"""

from typing import List
from fastapi import APIRouter, Depends, UploadFile, File, Form, status
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.services.upload import UploadService, DEFAULT_UPLOAD_TYPE
from rentals_api.schemas.upload import UploadResponse, UploadedFile
from rentals_api.schemas.error import error_responses
from rentals_api.utils.dependencies import get_current_account, get_upload_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload images",
    description=(
        "Upload one or more images (any image/* type, 10MB each). Files are stored under "
        "the given type folder and their public URLs are returned in upload order. "
        "A single invalid file rejects the whole request."
    ),
    responses=error_responses(400, 401, 422)
)
async def upload_images(
    files: List[UploadFile] = File(..., description="Image files to upload"),
    upload_type: str = Form(DEFAULT_UPLOAD_TYPE, alias="type", description="Target folder, e.g. properties or owners"),
    account: AuthenticatedAccount = Depends(get_current_account),
    upload_service: UploadService = Depends(get_upload_service)
) -> UploadResponse:
    saved = await upload_service.save_images(files, upload_type)
    logger.info(f"{account.role.value.capitalize()} {account.id} uploaded {len(saved)} files to '{upload_type}'")

    return UploadResponse(
        success=True,
        files=[UploadedFile(**entry) for entry in saved],
        urls=[entry["url"] for entry in saved]
    )
