from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from loguru import logger
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.users import crud as user_crud
from app.users import schemas as user_schemas
from app.users.models import User


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")

LOCAL_PROVIDER = "local"

# profile claims mirrored from externally issued tokens
PROFILE_CLAIMS = ("email", "first_name", "last_name", "profile_image_url")


def build_claims(user: User) -> user_schemas.UserClaims:
    return user_schemas.UserClaims(
        sub=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        provider=user.auth_provider or LOCAL_PROVIDER,
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = user_crud.get_user_by_email(db, email)
    if not user:
        return None
    if not user_crud.validate_password(db, user.id, password):
        return None
    return user


def sync_external_user(db: Session, payload: dict) -> User:
    """Keep the local mirror of an externally authenticated identity current."""
    user = user_crud.get_user(db, payload["sub"])
    supplied = {k: payload[k] for k in PROFILE_CLAIMS if k in payload}

    if user is not None and all(getattr(user, k) == v for k, v in supplied.items()):
        return user

    if supplied.get("email"):
        owner = user_crud.get_user_by_email(db, supplied["email"])
        if owner is not None and owner.id != payload["sub"]:
            logger.warning(f"External identity {payload['sub']} claims email of user {owner.id}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already belongs to another account",
            )

    return user_crud.upsert_user(
        db,
        user_schemas.UserUpsert(id=payload["sub"], auth_provider=payload["provider"], **supplied),
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        raise credentials_exception

    if not payload.get("sub"):
        raise credentials_exception

    provider = payload.get("provider", LOCAL_PROVIDER)
    if provider != LOCAL_PROVIDER:
        return sync_external_user(db, {**payload, "provider": provider})

    user = user_crud.get_user(db, payload["sub"])
    if user is None:
        logger.warning(f"Token for unknown user: {payload['sub']}")
        raise credentials_exception
    return user
