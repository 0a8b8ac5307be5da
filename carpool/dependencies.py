from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from carpool.context import AppContext
from carpool.database import get_context, get_db
from carpool.models.user import User, RoleName
from carpool.utils.exceptions import UnauthorizedException, ForbiddenException

# auto_error=False so a missing header goes through our 401 envelope, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
) -> User:
    """Resolve `Authorization: Bearer <token>` to a User loaded in the request session."""
    if credentials is None:
        raise UnauthorizedException("Authorization header required")

    claims = ctx.security.verify_access_token(credentials.credentials)
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject.isdigit():
        raise UnauthorizedException("Invalid token claims")

    user = db.get(User, int(subject))
    if user is None:
        raise UnauthorizedException("User no longer exists")
    return user


def require_roles(*roles: RoleName):
    """Dependency factory: the caller's role must be one of `roles`, else 403."""
    allowed = ", ".join(r.value for r in roles)

    def check_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenException(f"Only {allowed} accounts can do this")
        return current_user

    return check_role


get_driver_user = require_roles(RoleName.DRIVER)
