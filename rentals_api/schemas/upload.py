"""
Pydantic schemas for the image upload endpoint.
"""

from pydantic import BaseModel, Field
from typing import List


class UploadedFile(BaseModel):
    """A stored image and the public URL it is served from."""

    url: str = Field(..., examples=["/uploads/properties/6f1c2b0e9a4d4c3e.jpg"])
    filename: str = Field(..., description="Name of the stored file")
    original_filename: str = Field(..., description="Name sent by the client")
    content_type: str = Field(..., examples=["image/jpeg"])
    size: int = Field(..., description="File size in bytes")


class UploadResponse(BaseModel):
    success: bool = True
    files: List[UploadedFile]
    urls: List[str] = Field(..., description="Public URLs in upload order")
