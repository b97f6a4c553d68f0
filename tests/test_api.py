"""Testes de ponta a ponta dos endpoints HTTP."""

import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


def upload(client, headers, category="hotel", name="lobby.png", content=PNG_BYTES):
    return client.post(
        "/api/upload-image",
        files={"image": (name, content, "image/png")},
        data={"category": category},
        headers=headers,
    )


def test_register_then_list(client, admin_headers, sample_participant):
    resp = client.post("/api/register", json=sample_participant)
    assert resp.status_code == 201
    assert resp.json() == {"message": "Success"}

    participants = client.get("/api/participants", headers=admin_headers).json()
    assert len(participants) == 1
    assert participants[0]["fullName"] == "Maria Souza"
    assert participants[0]["jobType"] == "Enfermeira"
    assert participants[0]["id"] == 1
    assert "timestamp" in participants[0]


def test_register_without_body(client, admin_headers):
    resp = client.post("/api/register")
    assert resp.status_code == 201

    (participant,) = client.get("/api/participants", headers=admin_headers).json()
    assert set(participant) == {"id", "timestamp"}


def test_register_with_empty_object(client, admin_headers):
    assert client.post("/api/register", json={}).status_code == 201
    assert len(client.get("/api/participants", headers=admin_headers).json()) == 1


def test_register_storage_failure_returns_generic_500(client, monkeypatch):
    def broken_append(data):
        raise OSError("/secret/path/participants.json: disk full")

    monkeypatch.setattr(client.app.state.backend.records, "append", broken_append)

    resp = client.post("/api/register", json={"fullName": "Ana"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal Server Error"}


def test_list_storage_failure_returns_generic_500(client, admin_headers, monkeypatch):
    def broken_list():
        raise OSError("disk gone")

    monkeypatch.setattr(client.app.state.backend.records, "list_all", broken_list)

    resp = client.get("/api/participants", headers=admin_headers)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal Server Error"}


def test_upload_feature_then_delete(client, admin_headers):
    resp = upload(client, admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Image uploaded"
    assert body["filename"].endswith("-lobby.png")
    image_id = body["id"]
    url = f"/uploads/{body['filename']}"

    features = client.get("/api/features").json()
    assert features["hotel"]["images"] == [url]
    assert features["park"] == {"title": "Parque", "images": []}

    served = client.get(url)
    assert served.status_code == 200
    assert served.content == PNG_BYTES

    rows = client.get("/api/admin-features", headers=admin_headers).json()
    assert rows == [{"id": image_id, "category": "hotel", "filename": body["filename"]}]

    resp = client.delete(f"/api/delete-image/{image_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Image deleted"}

    assert client.get("/api/features").json()["hotel"]["images"] == []
    assert client.get("/api/admin-features", headers=admin_headers).json() == []
    assert client.get(url).status_code == 404

    resp = client.delete(f"/api/delete-image/{image_id}", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Image not found"}


def test_features_endpoint_is_public(client):
    resp = client.get("/api/features")

    assert resp.status_code == 200
    assert set(resp.json()) == {"hotel", "beaches", "baths", "park"}


def test_upload_without_file_is_bad_request(client, admin_headers):
    resp = client.post("/api/upload-image", data={"category": "hotel"}, headers=admin_headers)

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_upload_with_empty_file_is_bad_request(client, admin_headers):
    resp = upload(client, admin_headers, content=b"")

    assert resp.status_code == 400


def test_upload_without_category_is_bad_request(client, admin_headers):
    resp = client.post(
        "/api/upload-image",
        files={"image": ("lobby.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )

    assert resp.status_code == 400


def test_upload_above_limit_is_rejected(client, admin_headers, config):
    resp = upload(client, admin_headers, content=b"x" * (config.max_upload_bytes + 1))

    assert resp.status_code == 413
    assert client.get("/api/admin-features", headers=admin_headers).json() == []


@pytest.mark.parametrize("image_id", ["999", "0"])
def test_delete_unknown_image_is_not_found(client, admin_headers, image_id):
    resp = client.delete(f"/api/delete-image/{image_id}", headers=admin_headers)

    assert resp.status_code == 404


def test_every_response_has_request_id(client):
    assert "X-Request-ID" in client.get("/api/features").headers


def test_health(client, storage_mode):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["storage"] == "ok"
    assert body["storage_mode"] == storage_mode


def test_index_is_served_from_public_dir(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert "inscricao" in resp.text


def test_image_with_unsafe_name_is_reachable_from_features(client, admin_headers):
    resp = upload(client, admin_headers, name="a b#1.png")
    assert resp.status_code == 200
    assert resp.json()["filename"].endswith("-a_b1.png")

    (url,) = client.get("/api/features").json()["hotel"]["images"]
    served = client.get(url)

    assert served.status_code == 200
    assert served.content == PNG_BYTES


@pytest.mark.parametrize(
    "kwargs",
    [
        {"json": [1, 2]},
        {"json": "just text"},
        {"data": {"fullName": "Ana"}},
        {"content": b"{not json", "headers": {"Content-Type": "application/json"}},
        {"content": b"fullName=Ana", "headers": {"Content-Type": "text/plain"}},
    ],
    ids=["array", "string", "form", "malformed", "text"],
)
def test_register_accepts_any_body_as_empty_bag(client, admin_headers, kwargs):
    resp = client.post("/api/register", **kwargs)
    assert resp.status_code == 201

    (participant,) = client.get("/api/participants", headers=admin_headers).json()
    assert set(participant) == {"id", "timestamp"}
