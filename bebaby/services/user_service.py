"""Service for member registration and token-based authentication."""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt
import jwt

from bebaby.domain.errors import AuthError, ForbiddenError, ValidationError
from bebaby.domain.models.user import User, UserType
from bebaby.domain.ports.persistence import UserRepository

logger = logging.getLogger(__name__)

MINIMUM_AGE = 18


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


class UserService:
    """Service for managing member registration and authentication."""

    def __init__(
        self,
        user_repository: UserRepository,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
        jwt_expiration_hours: int = 24 * 7,
    ):
        if jwt_secret == "change-me":
            logger.warning("JWT_SECRET is using the default value. Configure a real secret in production.")
        self.user_repository = user_repository
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.jwt_expiration_hours = jwt_expiration_hours

    def register(
        self,
        *,
        email: str,
        username: str,
        password: str,
        birthdate: date,
        user_type: UserType,
        name: Optional[str] = None,
        gender: Optional[str] = None,
        looking_for: Optional[str] = None,
        state: Optional[str] = None,
        city: Optional[str] = None,
    ) -> User:
        """
        Register a new member.

        Uniqueness of email and username is left to the storage constraints; a
        violation surfaces as ``ConflictError`` from the repository.

        Raises:
            ValidationError: If the member is under age
            ConflictError: If the email or username is already taken
        """
        if _age_on(birthdate, date.today()) < MINIMUM_AGE:
            raise ValidationError(f"birthdate: members must be at least {MINIMUM_AGE} years old")

        user = self.user_repository.create_user(
            email=email.strip().lower(),
            username=username.strip(),
            password_hash=hash_password(password),
            user_type=user_type,
            name=name,
            birthdate=birthdate,
            gender=gender,
            looking_for=looking_for,
            state=state,
            city=city,
        )
        logger.info("Registered member %s (%s)", user.id, user.user_type.value)
        return user

    def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate a member with email and password.

        Returns:
            Tuple of (User, access token)

        Raises:
            AuthError: On unknown email or wrong password
            ForbiddenError: If the account is banned or deactivated
        """
        user = self.user_repository.get_user_by_email(email.strip().lower())
        if not user or not verify_password(password, user.password_hash):
            raise AuthError("Invalid email or password")
        if not user.can_interact:
            raise ForbiddenError("Account is not active")
        return user, self.create_token(user)

    def create_token(self, user: User) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": user.id,
            "username": user.username,
            "iat": now,
            "exp": now + timedelta(hours=self.jwt_expiration_hours),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm=self.jwt_algorithm)

    def resolve_token(self, token: str) -> User:
        """Decode a bearer token and load the member it names."""
        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=[self.jwt_algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError("Invalid token") from exc

        user_id = payload.get("sub")
        if not user_id:
            raise AuthError("Invalid token")
        user = self.user_repository.get_user(user_id)
        if not user:
            raise AuthError("User not found")
        return user


def _age_on(birthdate: date, today: date) -> int:
    years = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        years -= 1
    return years
