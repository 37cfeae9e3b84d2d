from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.config import settings
from app.core.security import create_access_token
from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.common import Message
from app.schemas.user import UserCreate, AdminCreate, Token, User as UserSchema
from app.services import identity

router = APIRouter(prefix="/auth", tags=["auth"])


def _build_token_response(user: User) -> Token:
    return Token(
        access_token=create_access_token(subject=str(user.id), role=user.role),
        token_type="bearer",
        user=UserSchema.model_validate(user),
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db)):
    user = identity.register(db, body.email, body.password)
    return _build_token_response(user)


@router.post("/admin/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def admin_register(body: AdminCreate, db: Session = Depends(get_db)):
    if body.admin_secret != settings.ADMIN_SECRET_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin secret",
        )
    user = identity.register(db, body.email, body.password, role="admin")
    return _build_token_response(user)


@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = identity.login(db, form_data.username, form_data.password)
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return _build_token_response(user)


@router.post("/logout", response_model=Message)
def logout(current_user: User = Depends(get_current_user)):
    """
    Tokens are stateless: the client ends its session by discarding the token.
    """
    return Message(message="Successfully logged out")


@router.get("/me", response_model=UserSchema)
def read_me(current_user: User = Depends(get_current_user)):
    """Return the user the bearer token belongs to."""
    return current_user
