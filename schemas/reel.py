from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .user import UserSummary


class ReelResponse(BaseModel):
    """A reel with its owner summary."""
    id: str
    video_url: str
    caption: str = ""
    created_at: datetime
    owner_id: str
    user: UserSummary = Field(validation_alias="owner")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class FeedReel(ReelResponse):
    """Feed entry enriched with interaction counts."""
    like_count: int = 0
    comment_count: int = 0
    # None when the viewer is anonymous
    is_liked: Optional[bool] = None


class FeedResponse(BaseModel):
    reels: List[FeedReel]


class ReelUploadResponse(BaseModel):
    message: str
    reel: ReelResponse


class ReelDeleteResponse(BaseModel):
    message: str
    media_deleted: bool


class LikeResponse(BaseModel):
    message: str
    liked: bool
    like_count: int


class CommentCreate(BaseModel):
    text: Optional[str] = Field(None, description="Comment text, trimmed before saving")


class CommentResponse(BaseModel):
    id: str
    text: str
    created_at: datetime
    reel_id: str
    owner_id: str
    user: UserSummary = Field(validation_alias="owner")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CommentListResponse(BaseModel):
    comments: List[CommentResponse]


class CommentCreateResponse(BaseModel):
    message: str
    comment: CommentResponse
