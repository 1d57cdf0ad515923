import time
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.categories.service import seed_default_categories
from app.security.passwords import hash_password, verify_password
from app.users import schemas as user_schema
from app.users.models import User


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()


def upsert_user(db: Session, user: user_schema.UserUpsert) -> User:
    """
    Insert or update an externally authenticated identity, keyed by id.
    Only the fields the caller supplied are overwritten.
    """
    data = user.model_dump(exclude_unset=True)
    db_user = db.get(User, user.id)

    if db_user is None:
        db_user = User(**data)
        if "auth_provider" not in data:
            db_user.auth_provider = user.auth_provider
        db.add(db_user)
        db.flush()
        seed_default_categories(db, db_user.id)
    else:
        for field, value in data.items():
            setattr(db_user, field, value)
        db_user.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(db_user)
    return db_user


def generate_local_user_id() -> str:
    # timestamp + random suffix; practically unique, not guaranteed
    return f"local_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def create_local_user(db: Session, registration: user_schema.UserRegistration) -> User:
    new_user = User(
        id=generate_local_user_id(),
        email=registration.email,
        first_name=registration.first_name,
        last_name=registration.last_name,
        password=hash_password(registration.password),
        auth_provider="local",
    )
    db.add(new_user)
    db.flush()
    seed_default_categories(db, new_user.id)

    db.commit()
    db.refresh(new_user)
    return new_user


def validate_password(db: Session, user_id: str, password: str) -> bool:
    user = get_user(db, user_id)
    if not user or not user.password:
        return False
    return verify_password(password, user.password)
