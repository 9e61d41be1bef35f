import pytest

from castpress.domain.entities import Podcast


@pytest.fixture
def tech(client, auth_headers):
    response = client.post(
        "/category",
        json={"name": "Tech News", "description": "Gadgets", "type": "article"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


def test_create(tech):
    assert tech["slug"] == "tech-news"
    assert tech["type"] == "article"


def test_create_requires_auth(client):
    assert client.post("/category", json={"name": "X"}).status_code == 401


def test_duplicate_name(client, auth_headers, tech):
    response = client.post("/category", json={"name": "Tech News"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Category already exists"


def test_invalid_type(client, auth_headers):
    response = client.post(
        "/category", json={"name": "Odd", "type": "video"}, headers=auth_headers
    )

    assert response.status_code == 400


def test_list_by_type(client, auth_headers, tech):
    client.post("/category", json={"name": "Shows", "type": "podcast"}, headers=auth_headers)
    client.post("/category", json={"name": "General"}, headers=auth_headers)

    everything = client.get("/category").json()
    articles = client.get("/category", params={"type": "article"}).json()

    assert [c["name"] for c in everything] == ["General", "Shows", "Tech News"]
    assert [c["name"] for c in articles] == ["General", "Tech News"]


def test_delete_leaves_content_readable(client, auth_headers, podcast_repo):
    category = client.post(
        "/category", json={"name": "Shows", "type": "podcast"}, headers=auth_headers
    ).json()
    podcast = podcast_repo.save(
        Podcast(title="P", audio_url="/media/a.mp3", category=category["id"])
    )

    client.delete(f"/category/{category['id']}", headers=auth_headers)
    response = client.get(f"/podcast/{podcast.id}")

    assert response.status_code == 200
    assert response.json()["category"] == category["id"]


def test_get_update_delete(client, auth_headers, tech):
    assert client.get(f"/category/{tech['id']}").json()["name"] == "Tech News"

    renamed = client.patch(
        f"/category/{tech['id']}", json={"name": "Science"}, headers=auth_headers
    )
    assert renamed.status_code == 200
    assert renamed.json()["slug"] == "science"
    assert renamed.json()["description"] == "Gadgets"

    deleted = client.delete(f"/category/{tech['id']}", headers=auth_headers)
    assert deleted.json() == {"message": "Category deleted successfully"}
    assert client.get(f"/category/{tech['id']}").status_code == 404
    assert client.delete(f"/category/{tech['id']}", headers=auth_headers).status_code == 404
