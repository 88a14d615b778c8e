from .user import (
    RegisterRequest, LoginRequest, UserSummary, UserResponse,
    AuthResponse, MessageResponse
)
from .reel import (
    ReelResponse, FeedReel, FeedResponse, ReelUploadResponse, ReelDeleteResponse,
    LikeResponse, CommentCreate, CommentResponse, CommentListResponse,
    CommentCreateResponse
)

__all__ = [
    # User models
    'RegisterRequest', 'LoginRequest', 'UserSummary', 'UserResponse',
    'AuthResponse', 'MessageResponse',

    # Reel models
    'ReelResponse', 'FeedReel', 'FeedResponse', 'ReelUploadResponse',
    'ReelDeleteResponse', 'LikeResponse', 'CommentCreate', 'CommentResponse',
    'CommentListResponse', 'CommentCreateResponse',
]
