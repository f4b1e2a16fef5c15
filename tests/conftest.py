import os
import sys
import tempfile
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# Config de test AVANT d'importer app
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="linkpage-uploads-"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Créer engine SQLite pour tests AVANT d'importer app
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
test_engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL, 
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# PATCH: remplacer le engine et SessionLocal du core.database AVANT d'importer app
import app.core.database
app.core.database.engine = test_engine
app.core.database.SessionLocal = TestingSessionLocal

# Maintenant importer app (qui utilisera notre engine SQLite)
from app.core.database import Base, get_db
from app.main import app

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    # Nettoie avant le test
    Base.metadata.drop_all(bind=test_engine)
    # Crée les tables
    Base.metadata.create_all(bind=test_engine)
    yield
    # Nettoie après le test
    Base.metadata.drop_all(bind=test_engine)

# Override la dépendance
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def client():
    """Client de test FastAPI"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = TestingSessionLocal()
    yield db
    db.close()


def create_user(db, email, username, name=None):
    from app.models.user import User

    user = User(email=email, username=username, name=name)
    user.set_password("pass123")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    from app.core.security import create_access_token

    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def alice(db):
    return create_user(db, "alice@example.com", "alice", name="Alice")


@pytest.fixture
def bob(db):
    return create_user(db, "bob@example.com", "bob", name="Bob")


@pytest.fixture
def auth_token(client, db):
    """Crée un utilisateur via l'API et retourne son token JWT"""
    # Créer un utilisateur
    client.post(
        "/auth/signup",
        json={"email": "test@example.com", "username": "testuser", "password": "pass123"}
    )
    
    # Se connecter pour avoir un token
    login_response = client.post(
        "/auth/login",
        json={"email": "test@example.com", "password": "pass123"}
    )
    
    return login_response.json()["access_token"]
