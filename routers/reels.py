import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Path, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from config import Settings
from database import get_db
from models import User
from schemas.reel import (
    CommentCreate, CommentCreateResponse, CommentListResponse, CommentResponse,
    FeedReel, FeedResponse, LikeResponse, ReelDeleteResponse, ReelResponse,
    ReelUploadResponse,
)
from services.media_host import CloudinaryClient
from services.reel_service import FeedItem, ReelService
from services.session import SessionState, get_current_user, get_session_state, get_settings
from utils.media_handler import MediaHandler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Reels"])


def get_media_host(request: Request) -> CloudinaryClient:
    return request.app.state.media_host


def get_reel_service(
    db: Session = Depends(get_db),
    media_host: CloudinaryClient = Depends(get_media_host),
) -> ReelService:
    return ReelService(db, media_host)


def feed_item_payload(item: FeedItem) -> FeedReel:
    return FeedReel(
        **ReelResponse.model_validate(item.reel).model_dump(),
        like_count=item.like_count,
        comment_count=item.comment_count,
        is_liked=item.is_liked,
    )


@router.get("", response_model=FeedResponse, summary="Latest reels")
async def list_reels(
    viewer: SessionState = Depends(get_session_state),
    service: ReelService = Depends(get_reel_service),
    settings: Settings = Depends(get_settings),
):
    """Up to ``FEED_LIMIT`` reels, newest first, with owner and interaction counts."""
    try:
        items = service.list_feed(viewer, limit=settings.FEED_LIMIT)
        return {"reels": [feed_item_payload(item) for item in items]}
    except Exception as e:
        logger.error(f"Fetch reels error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch reels"
        )


@router.post(
    "/upload",
    response_model=ReelUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a reel",
)
async def upload_reel(
    video: Optional[UploadFile] = File(None, description="Video file"),
    caption: Optional[str] = Form(None, description="Optional caption"),
    current_user: User = Depends(get_current_user),
    service: ReelService = Depends(get_reel_service),
    settings: Settings = Depends(get_settings),
):
    """
    Upload a video to the media host and create a reel.

    - **video**: required video file
    - **caption**: optional, trimmed
    """
    data = await MediaHandler(settings.MEDIA_MAX_UPLOAD_MB).read_video(video)
    try:
        reel = await run_in_threadpool(
            service.upload_reel, current_user, data, caption, video.filename
        )
        return {
            "message": "Reel uploaded successfully",
            "reel": ReelResponse.model_validate(reel),
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Upload error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload video"
        )


@router.delete("/{reel_id}", response_model=ReelDeleteResponse, summary="Delete own reel")
async def delete_reel(
    reel_id: str = Path(..., description="Reel ID"),
    current_user: User = Depends(get_current_user),
    service: ReelService = Depends(get_reel_service),
):
    try:
        result = await run_in_threadpool(service.delete_reel, current_user, reel_id)
        return {"message": "Reel deleted successfully", "media_deleted": result.media_deleted}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Delete error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete reel"
        )


@router.post(
    "/{reel_id}/like",
    response_model=LikeResponse,
    summary="Like or unlike a reel",
    responses={201: {"model": LikeResponse, "description": "Liked"}},
)
async def toggle_like(
    reel_id: str = Path(..., description="Reel ID"),
    current_user: User = Depends(get_current_user),
    service: ReelService = Depends(get_reel_service),
):
    """Returns 201 when the reel becomes liked and 200 when the like is removed."""
    try:
        result = service.toggle_like(current_user, reel_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Like error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to like/unlike reel"
        )

    return JSONResponse(
        status_code=status.HTTP_201_CREATED if result.liked else status.HTTP_200_OK,
        content={
            "message": "Liked" if result.liked else "Unliked",
            "liked": result.liked,
            "like_count": result.like_count,
        },
    )


@router.get("/{reel_id}/comments", response_model=CommentListResponse, summary="Reel comments")
async def list_comments(
    reel_id: str = Path(..., description="Reel ID"),
    service: ReelService = Depends(get_reel_service),
):
    """Newest first. A reel that does not exist has no comments."""
    try:
        return {"comments": [CommentResponse.model_validate(c) for c in service.list_comments(reel_id)]}
    except Exception as e:
        logger.error(f"Get comments error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch comments"
        )


@router.post(
    "/{reel_id}/comments",
    response_model=CommentCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a reel",
)
async def add_comment(
    payload: CommentCreate,
    reel_id: str = Path(..., description="Reel ID"),
    current_user: User = Depends(get_current_user),
    service: ReelService = Depends(get_reel_service),
):
    try:
        comment = service.add_comment(current_user, reel_id, payload.text)
        return {"message": "Comment added", "comment": CommentResponse.model_validate(comment)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Add comment error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add comment"
        )
