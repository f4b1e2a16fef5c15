from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from app.core.config import settings

ALGORITHM = "HS256"
ACCESS = "access"
REFRESH = "refresh"

def _create_token(user_id: int, email: str, minutes: int, token_type: str) -> str:
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": datetime.utcnow() + timedelta(minutes=minutes),
        "type": token_type
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)

def create_access_token(user_id: int, email: str) -> str:
    # token court, envoyé par l'éditeur à chaque requête
    return _create_token(user_id, email, settings.JWT_EXPIRE_MIN, ACCESS)

def create_refresh_token(user_id: int, email: str) -> str:
    return _create_token(user_id, email, settings.JWT_REFRESH_EXPIRE_MIN, REFRESH)

def verify_token(token: str, token_type: Optional[str] = None) -> Optional[dict]:
    """Payload du token, ou None s'il est invalide, expiré ou du mauvais type"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if token_type is not None and payload.get("type") != token_type:
        return None
    return payload

def decode_token(token: str) -> Optional[int]:
    payload = verify_token(token, ACCESS)
    return payload.get("user_id") if payload else None
