import uuid
from fastapi.testclient import TestClient
from wellness_api.main import app

client = TestClient(app)
PWD = "StrongPassw0rd!"

def uniq_email(prefix="u"):
    return f"{prefix}-{uuid.uuid4().hex[:8]}@ex.com"

def register(email=None, password=PWD, name="Test"):
    email = email or uniq_email()
    r = client.post("/api/auth/register", json={"email": email, "name": name, "password": password})
    assert r.status_code == 201, r.text
    body = r.json()["data"]
    return email, body["token"], body["user"]["id"]

def auth(token):
    return {"Authorization": f"Bearer {token}"}

def new_session(token, **overrides):
    payload = {
        "title": "Morning flow",
        "description": "Gentle yoga to start the day",
        "tags": "yoga, morning",
        "duration": "30 min",
    }
    payload.update(overrides)
    r = client.post("/api/sessions", headers=auth(token), json=payload)
    assert r.status_code == 201, r.text
    return r.json()["data"]
