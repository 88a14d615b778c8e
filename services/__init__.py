"""
Services package for the application.

This package contains the service classes that hold the business logic
and the client for the external media host.
"""
from .user_service import UserService
from .session import SessionResolver, Anonymous, Identified, ANONYMOUS
from .media_host import CloudinaryClient, MediaUploadResult
from .reel_service import ReelService, FeedItem, LikeToggleResult, DeletionResult

__all__ = [
    'UserService',
    'SessionResolver',
    'Anonymous',
    'Identified',
    'ANONYMOUS',
    'CloudinaryClient',
    'MediaUploadResult',
    'ReelService',
    'FeedItem',
    'LikeToggleResult',
    'DeletionResult',
]
