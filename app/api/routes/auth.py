import hmac
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.core.auth_dependency import ADMIN_ROLE
from app.core.config import ADMIN_EMAIL, ADMIN_PASSWORD
from app.core.security import hash_password, verify_password, create_access_token
from app.db.session import get_db
from app.db.models.user import User
from app.schemas.auth import SignupRequest, SignupResponse, TokenResponse, AdminLoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    email = payload.email.lower()
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        full_name=payload.full_name,
        email=email,
        password_hash=hash_password(payload.password),
        preferred_language=payload.preferred_language,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User signed up: user_id={user.id}")
    return {"message": "User created successfully", "user_id": user.id}


@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    # OAuth2 form sends "username", we treat it as email
    user = db.query(User).filter(User.email == form_data.username.lower()).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if user.is_blocked:
        raise HTTPException(status_code=403, detail="Account is blocked")

    return {"access_token": create_access_token({"sub": user.id}), "token_type": "bearer"}


@router.post("/admin/login", response_model=TokenResponse)
def admin_login(payload: AdminLoginRequest):
    if not ADMIN_EMAIL or not ADMIN_PASSWORD:
        logger.error("Admin login attempted but ADMIN_EMAIL/ADMIN_PASSWORD are not configured")
        raise HTTPException(status_code=401, detail="Invalid admin credentials")

    # compare_digest only accepts ASCII str, so compare UTF-8 bytes
    email_ok = hmac.compare_digest(payload.email.lower().encode("utf-8"), ADMIN_EMAIL.lower().encode("utf-8"))
    password_ok = hmac.compare_digest(payload.password.encode("utf-8"), ADMIN_PASSWORD.encode("utf-8"))
    if not (email_ok and password_ok):
        logger.warning("Failed admin login attempt")
        raise HTTPException(status_code=401, detail="Invalid admin credentials")

    token = create_access_token({"sub": ADMIN_EMAIL, "role": ADMIN_ROLE})
    return {"access_token": token, "token_type": "bearer"}
