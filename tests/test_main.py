def test_home_endpoint(client):
    response = client.get("/")

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "SkillConnect API running"
    assert payload["status"] == "success"
    assert payload["data"]["service"] == "skillconnect-backend"


def test_ping_returns_plain_pong(client):
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.text == "pong"
