"""Request/response schemas for subforums."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MediaFile(BaseModel):
    """An uploaded file read into memory."""

    filename: str = ""
    content: bytes = Field(..., min_length=1)


class SubforumCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=5000)
    icon: MediaFile
    banner: MediaFile


class SubforumItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    user_id: str
    icon: str
    banner: str
    created_at: datetime


class SubforumData(BaseModel):
    subforum: SubforumItem


class SubforumListData(BaseModel):
    subforums: list[SubforumItem]


class SubforumDeletedData(BaseModel):
    id: str
