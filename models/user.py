import uuid
from datetime import datetime
from typing import TYPE_CHECKING
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from database import Base

# Import for type checking to avoid circular imports
if TYPE_CHECKING:
    from .reel import Reel, ReelLike, ReelComment


def generate_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """User model for storing credentials and display name."""
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships - using string-based references to avoid circular imports
    reels = relationship("Reel", back_populates="owner", order_by="Reel.created_at.desc()")
    reel_likes = relationship("ReelLike", back_populates="owner")
    reel_comments = relationship("ReelComment", back_populates="owner")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
