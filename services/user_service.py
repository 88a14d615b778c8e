from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from models.user import User
from core.exceptions import ValidationError, DuplicateEmail, InvalidCredentials
from core.security import get_password_hash, verify_password, MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)


class UserService:
    """Credential store: creates users and looks them up."""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> User:
        """
        Register a new user.

        Args:
            name: Display name
            email: Email address, compared case-sensitively
            password: Plaintext password, only its bcrypt hash is stored

        Returns:
            The created user

        Raises:
            ValidationError: If a field is empty or the password is too short
            DuplicateEmail: If the email is already registered
        """
        if not name or not email or not password:
            raise ValidationError("All fields are required")

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        if self.find_by_email(email):
            raise DuplicateEmail()

        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against another registration with the same email
            self.db.rollback()
            raise DuplicateEmail()
        self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def authenticate(self, email: Optional[str], password: Optional[str]) -> User:
        """Check credentials and return the matching user."""
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.find_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            raise InvalidCredentials()
        return user
