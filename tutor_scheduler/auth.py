from datetime import datetime, timedelta
from typing import Optional
from jose import jwt, JWTError
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from .config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from .models import UserRole, User
from .database import get_db

# Identity is resolved from a bearer token issued elsewhere; missing headers are
# answered with 401 here instead of letting HTTPBearer pick the status code
security = HTTPBearer(auto_error=False)


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    """Create an access token for a teacher; ``sub`` must be the user id"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def create_token_for_user(user: User, expires_delta: timedelta | None = None) -> str:
    return create_access_token({"sub": str(user.id), "role": user.role.value}, expires_delta)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Get current teacher from the bearer token"""
    if credentials is None or not credentials.credentials:
        raise _credentials_exception("Not authenticated")

    try:
        payload = jwt.decode(credentials.credentials, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _credentials_exception()

    user_id = payload.get("sub")
    token_type = payload.get("type")

    if user_id is None:
        raise _credentials_exception()

    # Ensure this is an access token
    if token_type != "access":
        raise _credentials_exception("Invalid token type")

    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise _credentials_exception()

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise _credentials_exception("User not found")

    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require admin role to access endpoint"""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user

