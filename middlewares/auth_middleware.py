from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config.database import get_db
from api.auth.auth_service import IdentityGateway
from helpers.exceptions import NotAuthenticated

# auto_error=False: a missing header is a routing decision, not a 403
security = HTTPBearer(auto_error=False)


def optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[int]:
    """Identity id of the caller, or None. Resolved fresh on every request."""
    token = credentials.credentials if credentials else None
    return IdentityGateway(db).current_identity(token)


def auth_middleware(identity_id: Optional[int] = Depends(optional_identity)) -> int:
    if identity_id is None:
        raise NotAuthenticated()
    return identity_id
