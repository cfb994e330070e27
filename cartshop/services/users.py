# cartshop/services/users.py
# Регистрация и аутентификация пользователей.
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from cartshop.core import security
from cartshop.core.config import settings
from cartshop.core.errors import ShopValidationError
from cartshop.models.user import User, RoleEnum

logger = logging.getLogger(__name__)


def find_by_username(db: Session, username: str) -> User | None:
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


def find_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def _validate_registration(username: str, email: str, password: str, confirm_password: str) -> None:
    # Порядок проверок определяет, какое сообщение увидит пользователь
    if not username:
        raise ShopValidationError("Username is required")
    if not email:
        raise ShopValidationError("Email is required")
    if not password or not password.strip():
        raise ShopValidationError("Password is required")
    if password != confirm_password:
        raise ShopValidationError("Passwords do not match")
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ShopValidationError(
            f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
        )


def register_user(
    db: Session,
    username: str | None,
    email: str | None,
    password: str | None,
    confirm_password: str | None,
) -> User:
    """
    Регистрация: проверка полей, уникальность username/email, bcrypt-хеш пароля.
    Роль по умолчанию = USER.
    """
    username = (username or "").strip()
    email = (email or "").strip()
    _validate_registration(username, email, password or "", confirm_password or "")

    if find_by_username(db, username) is not None:
        raise ShopValidationError("Username already exists")
    if find_by_email(db, email) is not None:
        raise ShopValidationError("Email already exists")

    user = User(
        username=username,
        email=email,
        password_hash=security.get_password_hash(password),
        role=RoleEnum.user.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Registered user {user.username} (id={user.id})")
    return user


def authenticate(db: Session, username: str, password: str) -> User | None:
    """Возвращает пользователя при верном пароле, иначе None."""
    user = find_by_username(db, username)
    if user is None or not security.verify_password(password, user.password_hash):
        return None
    return user
