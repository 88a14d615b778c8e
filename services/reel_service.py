from dataclasses import dataclass
from typing import Dict, List, Optional, Set
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from core.exceptions import EmptyText, Forbidden, MediaHostFailure, NotFound
from models import User, Reel, ReelLike, ReelComment
from services.media_host import CloudinaryClient
from services.session import SessionState, Identified

logger = logging.getLogger(__name__)


@dataclass
class FeedItem:
    reel: Reel
    like_count: int
    comment_count: int
    # None for anonymous viewers
    is_liked: Optional[bool]


@dataclass
class LikeToggleResult:
    liked: bool
    like_count: int


@dataclass
class DeletionResult:
    """
    Outcome of a reel deletion.

    The database row is always removed once this is returned;
    ``media_deleted`` is False when the media host could not delete the video.
    """
    reel_id: str
    media_deleted: bool


class ReelService:
    """Service for reel uploads, the feed, likes, comments and deletion."""

    def __init__(self, db: Session, media_host: Optional[CloudinaryClient] = None):
        self.db = db
        self.media_host = media_host

    def get_reel(self, reel_id: str) -> Reel:
        reel = self.db.query(Reel).filter(Reel.id == reel_id).first()
        if reel is None:
            raise NotFound("Reel not found")
        return reel

    # Media ingest

    def create_reel(self, user: User, video_url: str, caption: Optional[str] = None,
                    media_public_id: Optional[str] = None) -> Reel:
        reel = Reel(
            owner_id=user.id,
            video_url=video_url,
            media_public_id=media_public_id or None,
            caption=(caption or "").strip(),
        )
        self.db.add(reel)
        self.db.commit()
        self.db.refresh(reel)
        return reel

    def upload_reel(self, user: User, video: bytes, caption: Optional[str] = None,
                    filename: str = "reel.mp4") -> Reel:
        """
        Send a video to the media host and record the resulting reel.

        Nothing is written to the database unless the upload succeeded.

        Raises:
            MediaHostFailure: If the media host rejected the upload
        """
        if self.media_host is None:
            raise MediaHostFailure("Media host is not configured")

        result = self.media_host.upload_video(video, filename=filename)
        reel = self.create_reel(user, result.secure_url, caption, result.public_id)
        logger.info(f"User {user.id} uploaded reel {reel.id}")
        return reel

    def list_feed(self, viewer: SessionState, limit: int = 50) -> List[FeedItem]:
        """Newest reels first, with counts and the viewer's like state."""
        reels = (
            self.db.query(Reel)
            .options(joinedload(Reel.owner))
            .order_by(Reel.created_at.desc())
            .limit(limit)
            .all()
        )
        return self._enrich(reels, viewer)

    def list_user_reels(self, user: User) -> List[FeedItem]:
        reels = (
            self.db.query(Reel)
            .options(joinedload(Reel.owner))
            .filter(Reel.owner_id == user.id)
            .order_by(Reel.created_at.desc())
            .all()
        )
        return self._enrich(reels, Identified(user=user))

    def _enrich(self, reels: List[Reel], viewer: SessionState) -> List[FeedItem]:
        if not reels:
            return []
        reel_ids = [reel.id for reel in reels]

        like_counts: Dict[str, int] = dict(
            self.db.query(ReelLike.reel_id, func.count(ReelLike.id))
            .filter(ReelLike.reel_id.in_(reel_ids))
            .group_by(ReelLike.reel_id)
            .all()
        )
        comment_counts: Dict[str, int] = dict(
            self.db.query(ReelComment.reel_id, func.count(ReelComment.id))
            .filter(ReelComment.reel_id.in_(reel_ids))
            .group_by(ReelComment.reel_id)
            .all()
        )

        liked: Optional[Set[str]] = None
        if isinstance(viewer, Identified):
            liked = {
                reel_id for (reel_id,) in
                self.db.query(ReelLike.reel_id)
                .filter(ReelLike.owner_id == viewer.user_id, ReelLike.reel_id.in_(reel_ids))
                .all()
            }

        return [
            FeedItem(
                reel=reel,
                like_count=like_counts.get(reel.id, 0),
                comment_count=comment_counts.get(reel.id, 0),
                is_liked=None if liked is None else reel.id in liked,
            )
            for reel in reels
        ]

    # Interactions

    def count_likes(self, reel_id: str) -> int:
        return self.db.query(ReelLike).filter(ReelLike.reel_id == reel_id).count()

    def toggle_like(self, user: User, reel_id: str) -> LikeToggleResult:
        """
        Like the reel, or remove the like if it already exists.

        A unique-constraint violation on insert means a concurrent request
        already created the like; that is reported as ``liked=True``. If no like
        exists after the rollback the reel itself disappeared in between.

        Raises:
            NotFound: If the reel does not exist
        """
        self.get_reel(reel_id)

        existing = self._find_like(user.id, reel_id)
        if existing is not None:
            self.db.query(ReelLike).filter(
                ReelLike.owner_id == user.id,
                ReelLike.reel_id == reel_id
            ).delete(synchronize_session=False)
            self.db.commit()
            return LikeToggleResult(liked=False, like_count=self.count_likes(reel_id))

        self.db.add(ReelLike(owner_id=user.id, reel_id=reel_id))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self._find_like(user.id, reel_id) is None:
                logger.info(f"Reel {reel_id} was deleted while user {user.id} liked it")
                raise NotFound("Reel not found")
            logger.info(f"Concurrent like on reel {reel_id} by user {user.id}, keeping existing row")
        return LikeToggleResult(liked=True, like_count=self.count_likes(reel_id))

    def _find_like(self, user_id: str, reel_id: str) -> Optional[ReelLike]:
        return self.db.query(ReelLike).filter(
            ReelLike.owner_id == user_id,
            ReelLike.reel_id == reel_id
        ).first()

    def add_comment(self, user: User, reel_id: str, text: Optional[str]) -> ReelComment:
        """
        Append a comment to a reel.

        Raises:
            EmptyText: If the text is empty after trimming
            NotFound: If the reel does not exist
        """
        text = (text or "").strip()
        if not text:
            raise EmptyText()

        self.get_reel(reel_id)

        comment = ReelComment(owner_id=user.id, reel_id=reel_id, text=text)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def list_comments(self, reel_id: str) -> List[ReelComment]:
        """Comments for a reel, newest first. Unknown reels have none."""
        return (
            self.db.query(ReelComment)
            .options(joinedload(ReelComment.owner))
            .filter(ReelComment.reel_id == reel_id)
            .order_by(ReelComment.created_at.desc())
            .all()
        )

    # Deletion

    def delete_reel(self, user: User, reel_id: str) -> DeletionResult:
        """
        Delete a reel owned by ``user``.

        The media host delete runs first and is best effort: its failure is
        logged and reported in the result, and the reel row is removed anyway.
        Likes and comments go with the reel.

        Raises:
            NotFound: If the reel does not exist
            Forbidden: If ``user`` does not own the reel
        """
        reel = self.get_reel(reel_id)
        if reel.owner_id != user.id:
            raise Forbidden("You can only delete your own reels")

        media_deleted = self._destroy_media(reel)

        self.db.delete(reel)
        self.db.commit()

        logger.info(f"User {user.id} deleted reel {reel_id} (media_deleted={media_deleted})")
        return DeletionResult(reel_id=reel_id, media_deleted=media_deleted)

    def _destroy_media(self, reel: Reel) -> bool:
        if self.media_host is None:
            logger.warning(f"No media host configured, leaving media for reel {reel.id}")
            return False
        public_id = reel.media_public_id or self.media_host.public_id_from_url(reel.video_url)
        try:
            return self.media_host.destroy(public_id)
        except Exception as e:
            logger.error(f"Media deletion failed for reel {reel.id} ({public_id}): {e}")
            return False
