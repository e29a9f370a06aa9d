# tests/test_http_client.py
import pytest

from conftest import make_token

from rateorant.utils.http_client import APIError, HTTPClient, auth_headers, normalize_list


async def test_get_returns_json(seeded, client):
    data = await client.get("/categories")
    assert [c["category"] for c in data] == ["Italian", "Japanese"]


async def test_bearer_header_only_with_token(seeded, client):
    token = make_token(20, "ursula")
    await client.get("/categories")
    await client.get("/favorites", token=token)
    assert seeded.requests[0][2] is None
    assert seeded.requests[1][2] == f"Bearer {token}"


async def test_empty_body_is_empty_dict(backend, client):
    backend.overrides["/categories"] = (204, "")
    assert await client.get("/categories") == {}


async def test_non_json_success_raises(backend, client):
    backend.overrides["/categories"] = (200, "<html>oops</html>")
    with pytest.raises(APIError) as exc:
        await client.get("/categories")
    assert exc.value.status_code == 200
    assert exc.value.message == "The server returned an invalid response"


async def test_error_detail_is_kept(seeded, client):
    with pytest.raises(APIError) as exc:
        await client.get("/restaurants/999")
    error = exc.value
    assert error.status_code == 404
    assert error.detail == "Restaurant not found"
    assert error.user_message("Failed to load") == "Restaurant not found"
    assert str(error) == "404: Restaurant not found"


async def test_error_without_detail_uses_fallback(backend, client):
    backend.overrides["/categories"] = (500, "Internal Server Error")
    with pytest.raises(APIError) as exc:
        await client.get("/categories")
    assert exc.value.detail is None
    assert exc.value.body == "Internal Server Error"
    assert exc.value.user_message("Failed to load") == "Failed to load"


async def test_connection_error_becomes_api_error():
    client = HTTPClient(base_url="http://127.0.0.1:1", timeout=2)
    try:
        with pytest.raises(APIError) as exc:
            await client.get("/categories")
        assert exc.value.status_code is None
        assert exc.value.message == "Could not connect to the server"
    finally:
        await client.close()


async def test_health_check(seeded, client):
    assert await client.check_api_health() is True
    seeded.overrides["/categories"] = (503, {"detail": "down"})
    assert await client.check_api_health() is False


def test_base_url_trailing_slash_is_stripped():
    assert HTTPClient(base_url="http://api.test/").base_url == "http://api.test"


def test_normalize_list():
    assert normalize_list([1, 2], "data") == [1, 2]
    assert normalize_list({"data": [1]}, "restaurants", "data") == [1]
    assert normalize_list({"restaurants": [1], "data": [2]}, "restaurants", "data") == [1]
    assert normalize_list({"data": "nope"}, "data") is None
    assert normalize_list("text", "data") is None


def test_auth_headers():
    assert auth_headers(None) == {}
    assert auth_headers("t") == {"Authorization": "Bearer t"}
