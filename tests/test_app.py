from conftest import auth_headers


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json() == {"message": "DocSpot API is running"}


def test_security_headers_on_api_responses(client):
    response = client.get("/api/doctors")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Cache-Control"] == "no-store, no-cache, must-revalidate"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found", "kind": "not_found"}


def test_request_validation_uses_error_envelope(client):
    response = client.post("/api/auth/login", json={"email": "a@example.com"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["kind"] == "validation_error"
    assert body["errors"][0]["field"] == "password"


def test_query_validation_is_a_400(client):
    response = client.get("/api/doctors", params={"minExperience": "lots"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "query.minExperience"


def test_invalid_json_body(client, patient):
    response = client.post(
        "/api/appointments",
        content="not json",
        headers={**auth_headers(patient), "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid JSON body"


def test_non_object_json_body(client, patient):
    response = client.post("/api/appointments", json=[1, 2, 3], headers=auth_headers(patient))

    assert response.status_code == 400
    assert response.json()["message"] == "Request body must be a JSON object"
