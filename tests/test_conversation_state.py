"""ConversationState: append-only order, bot-image lookup and windowing."""

from __future__ import annotations

import pytest

from conftest import bot_turn, user_turn
from services.conversation_state import ConversationState


def _filled(count: int) -> ConversationState:
    state = ConversationState()
    for index in range(count):
        state.append(user_turn(f"request {index}"))
    return state


def test_recent_window_returns_everything_when_shorter() -> None:
    state = _filled(4)

    window = state.recent_window(6)

    assert [turn.text for turn in window] == ["request 0", "request 1", "request 2", "request 3"]


def test_recent_window_returns_last_n_in_order() -> None:
    state = _filled(10)

    window = state.recent_window(6)

    assert [turn.text for turn in window] == [f"request {i}" for i in range(4, 10)]


def test_recent_window_non_positive_is_empty() -> None:
    state = _filled(3)

    assert state.recent_window(0) == []
    assert state.recent_window(-2) == []


def test_last_bot_turn_with_image_picks_latest_by_position(png_image) -> None:
    state = ConversationState()
    first = bot_turn(png_image)
    state.append(user_turn("a"))
    state.append(first)
    state.append(user_turn("b"))
    latest = bot_turn(png_image, text="Here's your edited thumbnail:")
    state.append(latest)
    state.append(bot_turn(None, text="text only"))
    state.append(user_turn("c", image=png_image))

    assert state.last_bot_turn_with_image() is latest


def test_last_bot_turn_with_image_none_without_bot_images(png_image) -> None:
    state = ConversationState()
    state.append(user_turn("with upload", image=png_image))
    state.append(bot_turn(None))

    assert state.last_bot_turn_with_image() is None


def test_turn_ids_increase_and_turns_are_immutable() -> None:
    state = _filled(3)
    ids = [turn.id for turn in state]

    assert ids == sorted(ids)
    assert len(set(ids)) == 3
    with pytest.raises(AttributeError):
        state.turns[0].text = "changed"  # type: ignore[misc]


def test_get_unknown_turn_raises_key_error() -> None:
    state = _filled(1)

    with pytest.raises(KeyError):
        state.get(-1)

