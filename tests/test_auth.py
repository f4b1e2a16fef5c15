def test_signup_success(client):
    """Test : créer un utilisateur avec succès"""
    response = client.post("/auth/signup", json={
        "email": "signup@example.com",
        "username": "signup_user",
        "password": "password123",
        "name": "Signup User"
    })
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "signup@example.com"
    assert data["username"] == "signup_user"
    assert data["name"] == "Signup User"
    assert "id" in data
    assert "password_hash" not in data  # Le password ne doit pas être retourné

def test_signup_duplicate_email(client):
    """Test : impossible de créer 2 users avec le même email"""
    client.post("/auth/signup", json={
        "email": "duplicate@example.com",
        "username": "user1_dup",
        "password": "password123"
    })
    response = client.post("/auth/signup", json={
        "email": "duplicate@example.com",
        "username": "user2_dup",
        "password": "password123"
    })
    assert response.status_code == 400
    assert "Email already registered" in response.json()["detail"]

def test_signup_duplicate_username(client):
    client.post("/auth/signup", json={"email": "a@example.com", "username": "same", "password": "password123"})
    response = client.post("/auth/signup", json={"email": "b@example.com", "username": "same", "password": "password123"})
    assert response.status_code == 400

def test_login_success(client):
    """Test : se connecter avec succès"""
    client.post("/auth/signup", json={
        "email": "login@example.com",
        "username": "loginuser",
        "password": "password123"
    })
    response = client.post("/auth/login", json={
        "email": "login@example.com",
        "password": "password123"
    })
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert "refresh_token" in data
    assert data["token_type"] == "bearer"

def test_login_wrong_password(client):
    """Test : impossible de se connecter avec un mauvais password"""
    client.post("/auth/signup", json={
        "email": "wrongpass@example.com",
        "username": "wronguser",
        "password": "correctpassword"
    })
    response = client.post("/auth/login", json={
        "email": "wrongpass@example.com",
        "password": "wrongpassword"
    })
    assert response.status_code == 401
    assert "Invalid" in response.json()["detail"]

def test_refresh_token(client):
    client.post("/auth/signup", json={"email": "refresh@example.com", "username": "refresher", "password": "pass123"})
    tokens = client.post("/auth/login", json={"email": "refresh@example.com", "password": "pass123"}).json()

    response = client.post("/auth/refresh", params={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200
    assert response.json()["access_token"]

def test_refresh_token_cannot_be_used_as_access_token(client):
    client.post("/auth/signup", json={"email": "r2@example.com", "username": "r2", "password": "pass123"})
    tokens = client.post("/auth/login", json={"email": "r2@example.com", "password": "pass123"}).json()

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert response.status_code == 401

def test_me(client, auth_token):
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {auth_token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "test@example.com"

def test_me_missing_token(client):
    response = client.get("/auth/me")
    assert response.status_code == 401

def test_health_z(client):
    """Test : l'endpoint health fonctionne"""
    response = client.get("/health/z")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}
