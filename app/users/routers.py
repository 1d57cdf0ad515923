from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from loguru import logger
from sqlalchemy.orm import Session

from app.database import get_db
from app.users import crud as user_crud, schemas
from app.users.auth import authenticate_user, build_claims, create_access_token, get_current_user
from app.users.models import User

router = APIRouter()


@router.get("/user", response_model=schemas.UserOut)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user


@router.post(
    "/register",
    response_model=schemas.RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(registration: schemas.UserRegistration, db: Session = Depends(get_db)):
    existing_user = user_crud.get_user_by_email(db, registration.email)
    if existing_user:
        logger.warning(f"Registration with existing email: {registration.email}")
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = user_crud.create_local_user(db, registration)
    logger.info(f"User registered: {user.id}")

    return {"message": "User created successfully", "user_id": user.id}


@router.post("/local-login", response_model=schemas.LoginResponse)
def local_login(credentials: schemas.UserLogin, db: Session = Depends(get_db)):
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        logger.warning(f"Authentication denied for email: {credentials.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    claims = build_claims(user)
    access_token = create_access_token(data=claims.model_dump())
    logger.info(f"User authenticated: {user.id}")

    return {
        "message": "Login successful",
        "user": claims,
        "access_token": access_token,
        "token_type": "bearer",
    }


@router.post("/token")
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    email = form_data.username.strip().lower()

    user = authenticate_user(db, email, form_data.password)
    if not user:
        logger.warning(f"Authentication denied for email: {email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access_token = create_access_token(data=build_claims(user).model_dump())
    return {"access_token": access_token, "token_type": "bearer"}
