"""HTTP tests for login, sessions and admin account management."""

ADMIN = {"username": "admin", "password": "root-pass-123"}


def _create_user(client, username="editor", password="editor-pass", question_id=None, answer=None):
    body = {"username": username, "password": password}
    if question_id is not None:
        body["securityQuestionId"] = question_id
        body["securityAnswer"] = answer
    resp = client.post("/api/admin/users", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def test_security_questions_are_seeded(client):
    rows = client.get("/api/admin/security-questions").json()
    assert len(rows) == 5
    assert rows[0]["question_text"] == "What was the name of your first pet?"


def test_login_requires_both_fields(client):
    resp = client.post("/api/admin/login", json={"username": "admin"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Username and password are required."}


def test_wrong_password_is_401(client):
    resp = client.post("/api/admin/login", json={"username": "admin", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid username or password."}


def test_unknown_user_is_401(client):
    resp = client.post("/api/admin/login", json={"username": "ghost", "password": "nope"})
    assert resp.status_code == 401


def test_login_sets_session(client):
    resp = client.post("/api/admin/login", json=ADMIN)
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["username"] == "admin"
    assert user["is_protected"] is True

    me = client.get("/api/admin/me")
    assert me.status_code == 200
    assert me.json()["username"] == "admin"
    assert set(me.json()) == {"id", "username", "is_protected", "securityQuestionId"}


def test_logout_clears_session(admin_client):
    assert admin_client.post("/api/admin/logout").json() == {"success": True}
    assert admin_client.get("/api/admin/me").status_code == 401


def test_security_challenge_round_trip(admin_client):
    _create_user(admin_client, question_id=2, answer="  Springfield ")
    admin_client.post("/api/admin/logout")

    resp = admin_client.post("/api/admin/login", json={"username": "editor", "password": "editor-pass"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["requiresSecurityAnswer"] is True
    assert body["securityQuestionId"] == 2
    assert body["securityQuestionText"] == "In what city were you born?"

    resp = admin_client.post(
        "/api/admin/login",
        json={"username": "editor", "password": "editor-pass", "securityAnswer": "Shelbyville"},
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Incorrect security answer."}

    resp = admin_client.post(
        "/api/admin/login",
        json={"username": "editor", "password": "editor-pass", "securityAnswer": "Springfield"},
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "editor"


def test_protected_account_is_never_challenged(admin_client):
    resp = admin_client.put("/api/admin/profile", json={"securityQuestionId": 1, "securityAnswer": "Rex"})
    assert resp.status_code == 200
    admin_client.post("/api/admin/logout")

    resp = admin_client.post("/api/admin/login", json=ADMIN)
    assert resp.status_code == 200


def test_create_user_duplicate_is_409(admin_client):
    _create_user(admin_client)
    resp = admin_client.post("/api/admin/users", json={"username": "editor", "password": "x"})
    assert resp.status_code == 409
    assert resp.json() == {"error": "Username already exists."}


def test_list_users(admin_client):
    _create_user(admin_client)
    names = [u["username"] for u in admin_client.get("/api/admin/users").json()]
    assert names == ["admin", "editor"]


def test_protected_account_cannot_be_changed(admin_client):
    admin_id = admin_client.get("/api/admin/me").json()["id"]

    resp = admin_client.put(f"/api/admin/users/{admin_id}", json={"password": "new-pass"})
    assert resp.status_code == 403
    assert resp.json() == {"error": "This account is protected and cannot be edited."}

    resp = admin_client.delete(f"/api/admin/users/{admin_id}")
    assert resp.status_code == 403
    assert resp.json() == {"error": "This account is protected and cannot be deleted."}


def test_update_and_delete_user(admin_client):
    user_id = _create_user(admin_client)

    resp = admin_client.put(f"/api/admin/users/{user_id}", json={})
    assert resp.status_code == 400

    resp = admin_client.put(f"/api/admin/users/{user_id}", json={"password": "changed-pass"})
    assert resp.status_code == 200

    assert admin_client.delete(f"/api/admin/users/{user_id}").status_code == 200
    assert admin_client.delete(f"/api/admin/users/{user_id}").status_code == 404


def test_question_change_needs_answer(admin_client):
    user_id = _create_user(admin_client)
    resp = admin_client.put(f"/api/admin/users/{user_id}", json={"securityQuestionId": 3})
    assert resp.status_code == 400

    resp = admin_client.put(f"/api/admin/users/{user_id}", json={"securityQuestionId": 99, "securityAnswer": "x"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Unknown security question."}


def test_account_management_needs_superadmin(admin_client):
    _create_user(admin_client)
    admin_client.post("/api/admin/logout")
    admin_client.post("/api/admin/login", json={"username": "editor", "password": "editor-pass"})

    resp = admin_client.get("/api/admin/users")
    assert resp.status_code == 403

    # Regular admins still manage content
    assert admin_client.get("/api/admin/events").status_code == 200
