from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer

from app.core.config import settings
from app.core.exceptions import Unauthorized
from app.schemas import auth_schemas

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)
# auto_error is off so a missing header becomes our own Unauthorized error
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def create_access_token(identity: auth_schemas.Identity, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = identity.model_dump(mode="json")
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: Optional[str]) -> auth_schemas.Identity:
    """Decode a bearer token into the identity it was issued for.

    Raises Unauthorized when the token is missing, malformed, expired or
    signed with another key.
    """
    if not token:
        raise Unauthorized("Authorization token required")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return auth_schemas.Identity(
            id=payload["id"],
            role=payload["role"],
            name=payload["name"],
            email=payload["email"],
        )
    except (JWTError, KeyError, ValueError):
        raise Unauthorized()


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    # Spend the same time as a real check when the account does not exist
    pwd_context.dummy_verify()
