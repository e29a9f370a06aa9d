# rateorant/session.py
"""
Identity resolution from the bearer credential and per-chat session lifecycle.

The credential is a three-part signed token; only the payload segment is
decoded here. Signature verification belongs to the backend.
"""

import base64
import binascii
import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .models import Identity, UserRole

logger = logging.getLogger(__name__)


def decode_token(token: Optional[str]) -> Optional[Dict[str, Any]]:
    """Decode the payload segment of a token without verifying it."""
    if not token:
        return None

    parts = token.split(".")
    if len(parts) != 3:
        logger.error(f"Invalid token format - expected 3 parts, got {len(parts)}")
        return None

    encoded_payload = parts[1]
    encoded_payload += "=" * (-len(encoded_payload) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(encoded_payload))
    except (binascii.Error, ValueError) as e:
        logger.error(f"Error decoding token: {e}")
        return None

    if not isinstance(payload, dict):
        logger.error("Token payload is not an object")
        return None
    return payload


def identity_from_token(token: Optional[str]) -> Optional[Identity]:
    payload = decode_token(token)
    if payload is None:
        return None

    try:
        return Identity(
            id=payload.get("sub"),
            username=payload.get("username"),
            email=payload.get("email"),
            role=payload.get("role") or UserRole.USER.value,
        )
    except ValidationError as e:
        logger.error(f"Token payload has no usable identity: {e.errors()[:1]}")
        return None


class Session:
    """Credential plus the identity decoded from it; anonymous when identity is None"""

    def __init__(self, token: Optional[str] = None, identity: Optional[Identity] = None):
        self.token = token
        self.identity = identity

    @classmethod
    def from_token(cls, token: Optional[str]) -> "Session":
        identity = identity_from_token(token)
        if identity is None:
            return cls()
        return cls(token=token, identity=identity)

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def is_owner(self) -> bool:
        return self.identity is not None and self.identity.is_owner

    def __repr__(self) -> str:
        who = self.identity.username if self.identity else "anonymous"
        return f"<Session {who}>"


class SessionStore:
    """Sessions per chat.

    ``load()`` populates sessions from the persisted credentials at startup,
    ``sign_in()`` replaces a chat's session wholesale and ``sign_out()``
    clears it. When a path is configured the credentials survive restarts
    as a JSON map of chat id to token.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._sessions: Dict[int, Session] = {}

    def load(self) -> int:
        if not self.path or not os.path.exists(self.path):
            return 0

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                tokens = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read session store {self.path}: {e}")
            return 0

        for chat_id, token in tokens.items():
            session = Session.from_token(token)
            if session.is_authenticated:
                self._sessions[int(chat_id)] = session
            else:
                logger.warning(f"Dropping undecodable credential for chat {chat_id}")

        logger.info(f"Restored {len(self._sessions)} sessions from {self.path}")
        return len(self._sessions)

    def get(self, chat_id: int) -> Session:
        return self._sessions.get(chat_id) or Session.anonymous()

    def sign_in(self, chat_id: int, token: str) -> Session:
        session = Session.from_token(token)
        if not session.is_authenticated:
            raise ValueError("Credential does not contain a valid identity")
        self._sessions[chat_id] = session
        self._save()
        logger.info(f"Chat {chat_id} signed in as {session.identity.username} ({session.identity.role})")
        return session

    def sign_out(self, chat_id: int) -> None:
        if self._sessions.pop(chat_id, None) is not None:
            self._save()
            logger.info(f"Chat {chat_id} signed out")

    def owner_chats(self) -> Dict[int, Session]:
        return {chat_id: s for chat_id, s in self._sessions.items() if s.is_owner}

    def _save(self) -> None:
        if not self.path:
            return
        tokens = {str(chat_id): s.token for chat_id, s in self._sessions.items()}
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(tokens, f)
        except OSError as e:
            logger.error(f"Could not write session store {self.path}: {e}")
