"""
Models package for the application.

This package contains all SQLAlchemy models for the application.
"""

# Import all models here to make them available when importing from models
from .user import User
from .reel import Reel, ReelLike, ReelComment

__all__ = [
    'User',
    'Reel',
    'ReelLike',
    'ReelComment',
]
