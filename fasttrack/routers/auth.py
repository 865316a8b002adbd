from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from email_validator import validate_email, EmailNotValidError

from fasttrack import crud
from fasttrack.auth import create_access_token, get_current_user, hash_password, verify_password
from fasttrack.config import settings
from fasttrack.database import get_db
from fasttrack.middleware.rate_limit import rate_limit_auth
from fasttrack.models import User
from fasttrack.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserOut
from fasttrack.schemas.profile import MeResponse, ProfileResponse
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _normalize_email(raw: str) -> str:
    try:
        result = validate_email(raw.strip(), check_deliverability=False)
    except EmailNotValidError:
        raise HTTPException(status_code=400, detail="Invalid email address")
    return result.normalized.lower()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@rate_limit_auth
async def register(
    request: Request,
    payload: RegisterRequest,
    db: Session = Depends(get_db)
):
    """Create an account and return it with a fresh token."""
    try:
        email = _normalize_email(payload.email)
        if len(payload.password) < settings.PASSWORD_MIN_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
            )
        if crud.get_user_by_email(db, email):
            raise HTTPException(status_code=409, detail="Email already registered")

        try:
            user = crud.create_user(db, email, hash_password(payload.password), payload.display_name)
        except IntegrityError:
            db.rollback()
            raise HTTPException(status_code=409, detail="Email already registered")

        logger.info(f"Registered user {user.id}")
        return AuthResponse(
            user=UserOut.from_orm(user),
            token=create_access_token(user.id, user.email),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error in register: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/login", response_model=AuthResponse)
@rate_limit_auth
async def login(
    request: Request,
    payload: LoginRequest,
    db: Session = Depends(get_db)
):
    try:
        user = crud.get_user_by_email(db, payload.email or "")
        if not user or not verify_password(payload.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid email or password")

        return AuthResponse(
            user=UserOut.from_orm(user),
            token=create_access_token(user.id, user.email),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Error in login: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/me", response_model=MeResponse)
async def me(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Current user together with their profile."""
    try:
        profile = crud.get_or_create_profile(db, current_user.id)
        return MeResponse(
            id=current_user.id,
            email=current_user.email,
            username=current_user.username,
            created_at=current_user.created_at,
            profile=ProfileResponse.from_orm(profile),
        )
    except Exception as e:
        logger.exception(f"Error in me: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
