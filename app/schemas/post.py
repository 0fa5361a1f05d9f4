"""Request/response schemas for posts and likes."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.subforum import MediaFile

MAX_MEDIA_PER_POST = 10


class PostCreateRequest(BaseModel):
    caption: str = Field(..., min_length=1, max_length=5000)
    subforum_id: str = Field(..., min_length=1, max_length=36)
    media: list[MediaFile] = Field(..., min_length=1, max_length=MAX_MEDIA_PER_POST)


class PostAuthor(BaseModel):
    id: str
    fullname: str


class PostSubforum(BaseModel):
    id: str
    name: str


class PostItem(BaseModel):
    """Denormalised post: the row plus its author, subforum and media URLs."""

    id: str
    caption: str
    status: str
    media: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None
    subforum: PostSubforum
    user: PostAuthor


class PostData(BaseModel):
    post: PostItem


class TakeDownItem(BaseModel):
    id: str
    status: str
    updated_at: datetime


class TakeDownData(BaseModel):
    post: TakeDownItem


class LikeItem(BaseModel):
    id: str = Field(..., description="Post id")
    like_count: int = Field(..., ge=0)


class LikeData(BaseModel):
    post: LikeItem
