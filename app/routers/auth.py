import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.deps import get_current_user
from app.core.security import REFRESH, create_access_token, create_refresh_token, verify_token
from app.models.user import User
from app.schemas.user import UserCreate, UserResponse, LoginRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

def _tokens_for(user: User, refresh_token: str = None) -> dict:
    return {
        "access_token": create_access_token(user.id, user.email),
        "refresh_token": refresh_token or create_refresh_token(user.id, user.email),
        "token_type": "bearer"
    }

@router.post("/signup", response_model=UserResponse)
def signup(user_data: UserCreate, db: Session = Depends(get_db)):
    """Créer un compte (la page est créée à la première ouverture de l'éditeur)"""
    if db.query(User).filter(User.email == user_data.email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    if db.query(User).filter(User.username == user_data.username).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")

    user = User(
        email=user_data.email,
        username=user_data.username,
        name=user_data.name,
        image=user_data.image
    )
    user.set_password(user_data.password)
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"New user {user.id} ({user.username})")
    return user

@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    # même message dans les deux cas: on ne révèle pas si l'email existe
    if not user or not user.verify_password(credentials.password):
        logger.warning(f"Failed login for {credentials.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    return _tokens_for(user)

@router.post("/refresh", response_model=TokenResponse)
def refresh(refresh_token: str, db: Session = Depends(get_db)):
    """Nouvel access_token à partir d'un refresh_token valide"""
    payload = verify_token(refresh_token, REFRESH)
    if not payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")

    user = db.query(User).filter(User.id == payload.get("user_id")).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return _tokens_for(user, refresh_token)

@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    # profil affiché dans l'éditeur (nom, avatar)
    return current_user
