import uuid

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from taskboard.auth.tokens import decode_access_token
from taskboard.db import get_db
from taskboard.models.user import User

bearer = HTTPBearer(auto_error=False)

class CallerContext:
    """The authenticated user a request acts as; passed into every task operation."""

    def __init__(self, user: User):
        self.user = user

    @property
    def user_id(self) -> uuid.UUID:
        return self.user.id

def resolve_caller(db: Session, token: str) -> CallerContext:
    try:
        sub = decode_access_token(token)["sub"]
        user_id = uuid.UUID(sub)
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        raise HTTPException(status_code=401, detail="invalid token")

    # a valid token for a removed account is still rejected
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="user not found")
    return CallerContext(user=user)

def get_caller(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> CallerContext:
    if creds is None or creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="missing bearer token")
    return resolve_caller(db, creds.credentials)
