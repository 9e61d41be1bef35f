from datetime import UTC, datetime, timedelta

from castpress.domain.entities import Article, Podcast

SUPER_PASSWORD = "rootpass123"
EDITOR_PASSWORD = "editorpass123"


def _login(client, username, password):
    return client.post("/admin/login", json={"username": username, "password": password})


# --- Login ---


def test_login_json(client, super_admin):
    response = _login(client, "root", SUPER_PASSWORD)

    assert response.status_code == 200
    body = response.json()
    assert body["token"] == body["access_token"]
    assert body["token_type"] == "bearer"

    me = client.get("/admin/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["username"] == "root"
    assert me.json()["is_super_admin"] is True


def test_login_form(client, editor):
    response = client.post(
        "/admin/login", data={"username": "editor", "password": EDITOR_PASSWORD}
    )

    assert response.status_code == 200


def test_login_failures_look_the_same(client, super_admin):
    wrong_password = _login(client, "root", "nope")
    unknown_user = _login(client, "ghost", "nope")

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"detail": "Invalid credentials"}


def test_login_missing_fields(client):
    response = client.post("/admin/login", json={"username": "root"})

    assert response.status_code == 400


def test_login_rate_limited(client, super_admin, rules):
    for _ in range(rules.rate_limits.login.max_attempts):
        _login(client, "root", "wrong")

    response = _login(client, "root", SUPER_PASSWORD)

    assert response.status_code == 429


def test_me_requires_token(client):
    assert client.get("/admin/me").status_code == 401
    bad = client.get("/admin/me", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401


# --- Admin management ---


def test_register_by_super_admin(client, auth_headers):
    response = client.post(
        "/admin/register",
        json={"username": "writer", "password": "writerpass"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["is_super_admin"] is False
    assert _login(client, "writer", "writerpass").status_code == 200


def test_register_rules(client, auth_headers, editor, editor_headers):
    forbidden = client.post(
        "/admin/register",
        json={"username": "x", "password": "longenough"},
        headers=editor_headers,
    )
    assert forbidden.status_code == 403

    taken = client.post(
        "/admin/register",
        json={"username": "editor", "password": "longenough"},
        headers=auth_headers,
    )
    assert taken.status_code == 400
    assert taken.json()["detail"] == "Admin already exists"

    short = client.post(
        "/admin/register", json={"username": "new", "password": "short"}, headers=auth_headers
    )
    assert short.status_code == 400


def test_change_password(client, editor, editor_headers):
    wrong = client.patch(
        "/admin/change-password",
        json={"oldPassword": "nope", "newPassword": "brandnewpass"},
        headers=editor_headers,
    )
    assert wrong.status_code == 400

    changed = client.patch(
        "/admin/change-password",
        json={"oldPassword": EDITOR_PASSWORD, "newPassword": "brandnewpass"},
        headers=editor_headers,
    )
    assert changed.status_code == 200

    assert _login(client, "editor", EDITOR_PASSWORD).status_code == 401
    assert _login(client, "editor", "brandnewpass").status_code == 200


def test_delete_admin(client, super_admin, auth_headers, editor, editor_headers):
    themselves = client.delete(f"/admin/delete/{super_admin.id}", headers=auth_headers)
    assert themselves.status_code == 400
    assert themselves.json()["detail"] == "Cannot delete yourself"

    by_editor = client.delete(f"/admin/delete/{super_admin.id}", headers=editor_headers)
    assert by_editor.status_code == 403

    response = client.delete(f"/admin/delete/{editor.id}", headers=auth_headers)
    assert response.status_code == 200

    # The deleted admin's token stops working immediately.
    assert client.get("/admin/me", headers=editor_headers).status_code == 401
    assert client.delete(f"/admin/delete/{editor.id}", headers=auth_headers).status_code == 404


# --- Scheduler ---


def test_scheduler_run(client, auth_headers, article_repo, podcast_repo):
    past = datetime.now(UTC) - timedelta(minutes=5)
    article = article_repo.save(Article(title="Due", content="x", scheduled_date=past))
    podcast_repo.save(Podcast(title="Due", audio_url="/media/a.mp3", scheduled_date=past))
    future = article_repo.save(
        Article(title="Later", content="x", scheduled_date=datetime.now(UTC) + timedelta(days=1))
    )

    assert client.post("/admin/scheduler/run").status_code == 401
    response = client.post("/admin/scheduler/run", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["published"] == {"article": 1, "podcast": 1}
    assert body["total_published"] == 2
    assert body["skipped"] is False
    assert article_repo.get_by_id(article.id).status == "published"
    assert article_repo.get_by_id(future.id).status == "draft"

    again = client.post("/admin/scheduler/run", headers=auth_headers).json()
    assert again["total_published"] == 0
