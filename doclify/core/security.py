from jose import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional

from doclify.core.config import settings

ALGORITHM = "HS256"

# Los tokens los emite el proveedor de identidad; aquí sólo se verifican.
# create_access_token queda para herramientas locales y tests.

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=60))
    to_encode = data.copy()
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)

def decode_access_token(token: str) -> dict:
    """Raises jose.JWTError when the token is invalid or expired."""
    return jwt.decode(
        token,
        settings.secret_key,
        algorithms=[ALGORITHM],
        options={"verify_aud": False},
    )
