import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import EmailStr, Field
from sqlalchemy.orm import Session

from shopapi.database import get_db
from shopapi.errors import InvalidRequest, NotFound, Unauthorized
from shopapi.models import User, UserRole
from shopapi.passwords import hash_password, verify_and_upgrade, verify_password
from shopapi.responses import envelope
from shopapi.schemas import RequestBody

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)


# =====================================================
# SCHEMAS
# =====================================================

class LoginPayload(RequestBody):
    email: EmailStr
    password: str


class RegisterPayload(RequestBody):
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    password: str = Field(..., min_length=1)


class UpdateProfilePayload(RequestBody):
    full_name: str = Field(..., min_length=1)
    phone: Optional[str] = None


class ChangePasswordPayload(RequestBody):
    old_password: str
    new_password: str = Field(..., min_length=1)


# =====================================================
# HELPERS
# =====================================================

def _serialize_user(user: User) -> dict:
    # password_hash never leaves the server
    return {
        "user_id":    user.id,
        "full_name":  user.full_name,
        "email":      user.email,
        "phone":      user.phone,
        "avatar_url": user.avatar_url,
        "role":       user.role,
    }


# =====================================================
# LOGIN
# =====================================================

@router.post("/login")
def login(payload: LoginPayload, db: Session = Depends(get_db)):
    user = (
        db.query(User)
        .filter(User.email == payload.email, User.is_active.is_(True))
        .first()
    )

    if not user:
        logger.warning("Login failed: unknown email | email=%s", payload.email)
        raise Unauthorized("Invalid email or password")

    ok, new_hash = verify_and_upgrade(payload.password, user.password_hash)
    if not ok:
        logger.warning("Login failed: bad password | user_id=%s", user.id)
        raise Unauthorized("Invalid email or password")

    if new_hash:
        user.password_hash = new_hash
        db.commit()
        db.refresh(user)

    return envelope(data=_serialize_user(user), message="Login successful")


# =====================================================
# REGISTER
# =====================================================

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterPayload, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == payload.email).first():
        raise InvalidRequest("Email already registered")

    user = User(
        full_name=payload.full_name,
        email=payload.email,
        phone=payload.phone,
        password_hash=hash_password(payload.password),
        role=UserRole.customer.value,
        is_active=True,
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("User registered | user_id=%s", user.id)
    return envelope(data={"user_id": user.id}, message="Account created successfully")


# =====================================================
# LOGOUT
# =====================================================

@router.post("/logout")
def logout():
    """Nothing is held server-side; the client just drops its copy of the user."""
    return envelope(message="Logged out")


# =====================================================
# PROFILE
# =====================================================

@router.put("/update-profile/{user_id}")
def update_profile(
    user_id: int,
    payload: UpdateProfilePayload,
    db: Session = Depends(get_db),
):
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    user.full_name = payload.full_name
    user.phone = payload.phone
    db.commit()
    db.refresh(user)

    return envelope(data=_serialize_user(user), message="Profile updated")


@router.put("/change-password/{user_id}")
def change_password(
    user_id: int,
    payload: ChangePasswordPayload,
    db: Session = Depends(get_db),
):
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    if not verify_password(payload.old_password, user.password_hash):
        raise InvalidRequest("Current password is incorrect")

    user.password_hash = hash_password(payload.new_password)
    db.commit()

    return envelope(message="Password changed")
