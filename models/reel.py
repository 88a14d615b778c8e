import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from .user import generate_id


class Reel(Base):
    __tablename__ = 'reels'
    id = Column(String(36), primary_key=True, default=generate_id)
    caption = Column(Text, nullable=False, default="")
    video_url = Column(String(1024), nullable=False)
    media_public_id = Column(String(512), nullable=True)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey('users.id'), nullable=False, index=True)

    owner = relationship("User", back_populates="reels")
    comments = relationship("ReelComment", back_populates="reel", cascade="all, delete-orphan")
    likes = relationship("ReelLike", back_populates="reel", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Reel(id={self.id}, owner_id={self.owner_id})>"


class ReelLike(Base):
    __tablename__ = 'reel_likes'
    id = Column(String(36), primary_key=True, default=generate_id)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    owner_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    reel_id = Column(String(36), ForeignKey('reels.id', ondelete="CASCADE"), nullable=False, index=True)

    owner = relationship("User", back_populates="reel_likes")
    reel = relationship("Reel", back_populates="likes")

    __table_args__ = (UniqueConstraint('owner_id', 'reel_id', name='_user_reel_like_uc'),)


class ReelComment(Base):
    __tablename__ = 'reel_comments'
    id = Column(String(36), primary_key=True, default=generate_id)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    owner_id = Column(String(36), ForeignKey('users.id'), nullable=False)
    reel_id = Column(String(36), ForeignKey('reels.id', ondelete="CASCADE"), nullable=False, index=True)

    owner = relationship("User", back_populates="reel_comments")
    reel = relationship("Reel", back_populates="comments")
