from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional
from fastapi import Depends
from jose import JWTError, jwt
from passlib.context import CryptContext
from listing_api.config import settings
from listing_api.exceptions import AuthenticationError
from listing_api.models.user import User
from listing_api.repositories.user_repository import UserRepository
from fastapi.security import OAuth2PasswordBearer

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
# auto_error is off so a missing header produces the same 401 envelope as a bad token
oauth2_bearer = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(email: str, user_id: int, expires_delta: Optional[timedelta] = None):
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    encode = {"sub": email, "id": user_id}
    expires = datetime.now(timezone.utc) + expires_delta
    encode.update({"exp": expires})
    return jwt.encode(encode, SECRET_KEY, algorithm=ALGORITHM)


def authenticate_user(email: str, password: str, users: UserRepository) -> Optional[User]:
    user = users.get_by_email(email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


async def get_current_user(token: Annotated[Optional[str], Depends(oauth2_bearer)]) -> dict:
    if not token:
        raise AuthenticationError("Authentication credentials were not provided")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")
    email = payload.get("sub")
    user_id = payload.get("id")
    if not email or not isinstance(user_id, int):
        raise AuthenticationError()
    return {"email": email, "id": user_id}
