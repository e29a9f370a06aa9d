# tests/test_dashboard_router.py
from unittest.mock import AsyncMock

import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from conftest import make_token
from rateorant.handlers.dashboard_router import dashboard_callback, process_search_query
from rateorant.registry import ControllerRegistry
from rateorant.session import SessionStore

CHAT_ID = 42


@pytest.fixture
def state():
    return FSMContext(storage=MemoryStorage(), key=StorageKey(bot_id=1, chat_id=CHAT_ID, user_id=CHAT_ID))


@pytest.fixture
def sessions():
    store = SessionStore()
    store.sign_in(CHAT_ID, make_token(20, "ursula"))
    return store


@pytest.fixture
def registry(client):
    return ControllerRegistry(client)


def review_fetches(backend):
    return len(backend.calls("GET", "/restaurants/1/reviews"))


async def test_search_shows_list_before_ratings(seeded, sessions, registry, state):
    seeded.delays["/restaurants/1/reviews"] = 0.2
    fetched_at_render = []
    shown = AsyncMock()

    def answer(text, **kwargs):
        fetched_at_render.append(review_fetches(seeded))
        return shown

    message = AsyncMock()
    message.text = "ita"
    message.answer.side_effect = answer

    await process_search_query(message, state, CHAT_ID, sessions.get(CHAT_ID), registry)

    assert fetched_at_render == [0]
    first = message.answer.await_args.args[0]
    assert "Italian Corner" in first
    assert "⭐⭐⭐⭐" not in first
    assert "⭐⭐⭐⭐" in shown.edit_text.await_args.args[0]


async def test_stale_dashboard_button_draws_before_ratings(seeded, sessions, registry, state):
    session = sessions.get(CHAT_ID)
    registry.dashboard(CHAT_ID, session)
    registry.invalidate_dashboard(CHAT_ID)
    seeded.delays["/restaurants/1/reviews"] = 0.2
    fetched_at_edit = []

    def edit_text(text, **kwargs):
        fetched_at_edit.append(review_fetches(seeded))

    callback = AsyncMock()
    callback.data = "dash:show"
    callback.message.edit_text.side_effect = edit_text

    await dashboard_callback(callback, state, CHAT_ID, session, sessions, registry)

    assert fetched_at_edit == [0, 1]
    assert "⭐⭐⭐⭐" in callback.message.edit_text.await_args.args[0]
    callback.answer.assert_awaited()
