from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from middlewares.auth_middleware import auth_middleware
from api.profiles import profiles_controller
from api.profiles.profiles_schema import ProfileEnvelope

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=ProfileEnvelope)
def read_profile(user_id: int = Depends(auth_middleware), db: Session = Depends(get_db)):
    """Current user's profile, shaped by their role."""
    return profiles_controller.get_profile(user_id, db)


@router.put("", response_model=ProfileEnvelope)
def update_profile(
    payload: Dict[str, Any] = Body(...),
    user_id: int = Depends(auth_middleware),
    db: Session = Depends(get_db),
):
    return profiles_controller.update_profile(user_id, payload, db)
