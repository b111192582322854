"""Visibility and view generation for Khanabi.

Core principle: a player sees the opponent's hand but NOT their own cards.
They only know their own cards through the hints they received.
"""

from __future__ import annotations

from typing import Any

from .game import GameState


# Keys that must NEVER appear in any player view
FORBIDDEN_KEYS = {
    "deck",
    "deck_order",
    "initial_deck",
    "cards",
    "debug",
    "_internal",
}


def view_for_player(state: GameState, player_id: int) -> dict[str, Any]:
    """
    Build the redacted game view for one player.

    Args:
        state: Current game state
        player_id: The player requesting the view

    Returns:
        View dictionary safe for the player to see
    """
    me = state.player(player_id)
    opponent = state.next_player if me is state.current_player else state.current_player

    # Own hand: knowledge and possibility sets only, never the true card
    my_hand = [
        {
            "position": i,
            "knowledge": slot.knowledge.value,
            **slot.card.info.model_dump(),
        }
        for i, slot in enumerate(me.hand)
    ]

    opponent_hand = [
        {"position": i, "color": slot.card.color.value, "rank": slot.card.rank}
        for i, slot in enumerate(opponent.hand)
    ]

    return {
        "player_id": player_id,
        "opponent_id": opponent.player_id,
        "my_hand_knowledge": my_hand,
        "opponent_hand": opponent_hand,
        "board": {color.value: rank for color, rank in state.board.top_ranks().items()},
        "deck_remaining": len(state.deck),
        "turn": state.turns,
        "correctly_played_cards": state.correctly_played_cards,
        "risked_turns": state.risked_turns,
        "is_my_turn": state.current_player.player_id == player_id,
        "game_over": state.is_finished,
    }


def assert_no_leaks(payload: Any, path: str = "") -> None:
    """
    Recursively assert that no forbidden keys appear in a payload.

    Raises AssertionError if any leak is detected.
    """
    if isinstance(payload, dict):
        for key, value in payload.items():
            key_str = str(key).lower()
            current_path = f"{path}.{key}" if path else str(key)
            if key_str in FORBIDDEN_KEYS:
                raise AssertionError(f"Forbidden key '{key}' found at {current_path}")
            assert_no_leaks(value, current_path)
    elif isinstance(payload, (list, tuple)):
        for i, item in enumerate(payload):
            assert_no_leaks(item, f"{path}[{i}]")


def assert_view_safe(view: dict[str, Any]) -> None:
    """
    Validate that a player view is safe (no information leaks).

    Checks:
    1. No forbidden keys anywhere in the payload
    2. Own-hand entries carry knowledge and possibility sets only
    """
    if not isinstance(view, dict):
        raise AssertionError("View must be a dictionary")

    if "player_id" not in view:
        raise AssertionError("View missing player_id")

    allowed_keys = {"position", "knowledge", "possible_colors", "possible_ranks"}
    for i, entry in enumerate(view.get("my_hand_knowledge", [])):
        extra_keys = set(entry.keys()) - allowed_keys
        if extra_keys:
            raise AssertionError(f"Card data {sorted(extra_keys)} found in my_hand_knowledge[{i}] - LEAK!")

    assert_no_leaks(view)
