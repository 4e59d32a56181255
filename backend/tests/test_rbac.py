from helpers import client, register, new_session, auth, PWD
from wellness_api.db import SessionLocal
from wellness_api.repositories.user_repo import UserRepository

def make_admin():
    email, _, user_id = register()
    db = SessionLocal()
    UserRepository(db).set_role(user_id, role="admin")
    db.close()
    return client.post("/api/auth/login", json={"email": email, "password": PWD}).json()["data"]["token"]

def test_admin_can_update_publish_and_delete_any_session():
    _, owner, owner_id = register()
    admin = make_admin()
    sid = new_session(owner)["id"]

    r = client.put(f"/api/sessions/{sid}", headers=auth(admin), json={"description": "moderated"})
    assert r.status_code == 200
    assert r.json()["data"]["description"] == "moderated"
    assert r.json()["data"]["user_id"] == owner_id

    assert client.put(f"/api/sessions/{sid}/publish", headers=auth(admin)).status_code == 200
    assert client.delete(f"/api/sessions/{sid}", headers=auth(admin)).status_code == 200
    assert client.get(f"/api/sessions/{sid}").status_code == 404

def test_admin_does_not_see_someone_elses_draft():
    _, owner, _ = register()
    admin = make_admin()
    sid = new_session(owner)["id"]
    assert client.get(f"/api/sessions/{sid}", headers=auth(admin)).status_code == 404

def test_admin_role_reported_by_me():
    admin = make_admin()
    assert client.get("/api/auth/me", headers=auth(admin)).json()["data"]["role"] == "admin"
