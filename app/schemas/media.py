from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.plan import PlanType
from app.schemas.common import PartialUpdate


class MediaFile(BaseModel):
    name: str
    url: str
    type: str
    size: int


class MediaPackCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    pack_type: str = Field("images", min_length=1, max_length=50)
    image_url: Optional[str] = Field(None, max_length=1024)
    min_plan: PlanType = PlanType.FREE


class MediaPackUpdate(PartialUpdate):
    not_nullable = ("name", "pack_type", "min_plan")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    pack_type: Optional[str] = Field(None, min_length=1, max_length=50)
    image_url: Optional[str] = Field(None, max_length=1024)
    min_plan: Optional[PlanType] = None


class MediaPackResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    pack_type: str
    image_url: Optional[str] = None
    min_plan: PlanType
    file_count: int
    media_files: List[MediaFile] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MediaPackSummary(BaseModel):
    """What a regular user sees in the media library list."""
    id: int
    name: str
    description: Optional[str] = None
    pack_type: str
    image_url: Optional[str] = None
    min_plan: PlanType
    file_count: int
    accessible: bool


class FailedUpload(BaseModel):
    name: str
    error: str


class BulkUploadResponse(BaseModel):
    uploaded: List[MediaFile]
    failed: List[FailedUpload]
    file_count: int


class RemoveFilesRequest(BaseModel):
    urls: List[str] = Field(..., min_length=1)
    delete_from_storage: bool = True


class TransferFilesRequest(BaseModel):
    target_pack_id: int
    urls: List[str] = Field(..., min_length=1)


class TransferFilesResponse(BaseModel):
    moved: int
    source_file_count: int
    target_file_count: int


class ImageUploadResponse(BaseModel):
    url: str
