# functions/auth.py

from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from db.services import ADMIN_ROLE, get_user_for_token, has_role
from functions.errors import ForbiddenError, PersistenceError, UnauthorizedError

def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()

def resolve_user(session: Session, authorization: Optional[str]) -> Optional[str]:
    try:
        return get_user_for_token(session, bearer_token(authorization))
    except SQLAlchemyError as e:
        print(f"❌ Session lookup error: {e}")
        raise PersistenceError(str(getattr(e, "orig", None) or e))

def require_admin(session: Session, user_id: Optional[str]) -> str:
    """
    Signed-out callers and signed-in non-admins get different errors. The
    role comes from the user_roles table, never from the caller's profile.
    """
    if not user_id:
        raise UnauthorizedError("Unauthorized")
    try:
        is_admin = has_role(session, user_id, ADMIN_ROLE)
    except SQLAlchemyError as e:
        print(f"❌ Role lookup error: {e}")
        raise PersistenceError(str(getattr(e, "orig", None) or e))
    if not is_admin:
        raise ForbiddenError("Admin access required")
    return user_id
