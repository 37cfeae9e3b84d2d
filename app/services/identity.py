import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import EmailAlreadyExists, InvalidCredentials, StoreFailure
from app.core.security import get_password_hash, verify_password
from app.models.user import User

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def login(db: Session, email: str, password: str) -> User:
    """Resolve an email/password pair to a user, comparing against the stored bcrypt hash."""
    try:
        user = db.query(User).filter(User.email == _normalize_email(email)).first()
    except SQLAlchemyError as e:
        raise StoreFailure("Login failed. Please try again.") from e
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise InvalidCredentials()
    return user


def register(db: Session, email: str, password: str, role: str = "user") -> User:
    email = _normalize_email(email)
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise EmailAlreadyExists()

    user = User(email=email, password_hash=get_password_hash(password), role=role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        raise EmailAlreadyExists() from e
    except SQLAlchemyError as e:
        db.rollback()
        raise StoreFailure("Registration failed") from e
    db.refresh(user)
    logger.info("Registered %s user %s", role, user.id)
    return user
