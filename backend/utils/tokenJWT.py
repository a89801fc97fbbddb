# utils/tokenJWT.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User, UserRole
from schemas.user import TokenData
from utils.errors import InvalidTokenError, UnauthenticatedError

# Authorization scheme; a missing header is reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


# Generate a new JWT access token for a user id and role
def create_access_token(user_id: str, role: UserRole, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {"sub": str(user_id), "role": UserRole(role).value, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# Validate signature, expiry and claims; returns the identity carried by the token
def decode_access_token(token: str) -> TokenData:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise InvalidTokenError("Could not validate credentials")

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in UserRole.__members__:
        raise InvalidTokenError("Could not validate credentials")
    return TokenData(user_id=user_id, role=UserRole(role))


# Retrieve the currently authenticated user based on the JWT token
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise UnauthenticatedError("Not authenticated")

    token_data = decode_access_token(credentials.credentials)

    # Reload the account so deletions and role changes apply immediately
    user = db.query(User).filter(User.id == token_data.user_id).first()
    if user is None:
        raise InvalidTokenError("Could not validate credentials")
    return user
