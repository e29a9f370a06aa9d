# rateorant/services/auth.py
import logging

from ..utils.http_client import APIError, HTTPClient

logger = logging.getLogger(__name__)


def _token_from(data) -> str:
    if not isinstance(data, dict):
        raise APIError("Invalid response from server")
    if data.get("err"):
        raise APIError(str(data["err"]), detail=data["err"])
    token = data.get("token")
    if not token:
        raise APIError("Invalid response from server")
    return token


async def sign_in(client: HTTPClient, username: str, password: str) -> str:
    """Exchange credentials for a bearer token."""
    logger.info(f"Signing in {username}")
    data = await client.post("/auth/sign-in", json={"username": username, "password": password})
    return _token_from(data)


async def sign_up(client: HTTPClient, username: str, email: str, password: str, role: str) -> str:
    """Register an account with the given role and return its bearer token."""
    logger.info(f"Signing up {username} as {role}")
    data = await client.post(
        "/auth/sign-up",
        json={"username": username, "email": email, "password": password, "role": role}
    )
    return _token_from(data)
