from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from config.database import get_db
from config.roles_config import EntryContext
from middlewares.auth_middleware import auth_middleware
from api.auth import auth_controller
from api.auth.auth_schema import (
    Credentials,
    SignupRequest,
    OrgSignupRequest,
    SignupResponse,
    TokenResponse,
    MeResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ─── Signup ────────────────────────────────────────────────────────────────────
@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest, db: Session = Depends(get_db)):
    """Create a volunteer account."""
    return auth_controller.signup(req, db)


@router.post("/org-signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def org_signup(req: OrgSignupRequest, db: Session = Depends(get_db)):
    """Create an organization account."""
    return auth_controller.org_signup(req, db)


# ─── Login (one entry point per role) ─────────────────────────────────────────
@router.post("/login", response_model=TokenResponse)
def login(credentials: Credentials, db: Session = Depends(get_db)):
    return auth_controller.login(credentials, EntryContext.standard, db)


@router.post("/org-login", response_model=TokenResponse)
def org_login(credentials: Credentials, db: Session = Depends(get_db)):
    return auth_controller.login(credentials, EntryContext.organizer_entry, db)


@router.get("/me", response_model=MeResponse)
def read_me(user_id: int = Depends(auth_middleware), db: Session = Depends(get_db)):
    return auth_controller.me(user_id, db)
