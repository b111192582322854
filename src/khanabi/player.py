"""Player hands, card deduction, and hint exchange."""

from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, Field

from .board import Board
from .deck import Deck
from .models import Card, CardInfo, CardKnowledge, Color, HandSlot


def validate_hint(
    hand: list[HandSlot],
    positions: list[int],
    matches: Callable[[Card], bool],
) -> tuple[bool, str | None]:
    """
    Check a hint claim against the true cards of a hand.

    The claim is valid only if every claimed position exists and matches,
    and no unclaimed position matches.

    Returns:
        (is_valid, error_message)
    """
    claimed = set(positions)
    for position in sorted(claimed):
        if position < 0 or position >= len(hand):
            return False, f"Position {position} is not in a hand of {len(hand)} cards"

    for position, slot in enumerate(hand):
        if position in claimed and not matches(slot.card):
            return False, f"Position {position} was claimed but does not match"
        if position not in claimed and matches(slot.card):
            return False, f"Position {position} matches but was not claimed"

    return True, None


class Player(BaseModel):
    """A player's hand. Slot positions shift left when a card leaves."""

    player_id: int
    hand: list[HandSlot] = Field(default_factory=list)

    @property
    def cards(self) -> list[Card]:
        return [slot.card for slot in self.hand]

    @property
    def knowledge(self) -> list[CardKnowledge]:
        return [slot.knowledge for slot in self.hand]

    def has_position(self, position: int) -> bool:
        return 0 <= position < len(self.hand)

    # Drawing

    def take_card(self, deck: Deck) -> bool:
        """Draw a card into the last slot. Returns False on an empty deck."""
        card = deck.get_card()
        if card is None:
            return False
        self.hand.append(HandSlot(card=card))
        return True

    def deal(self, deck: Deck, hand_size: int) -> int:
        """Replace the hand with up to hand_size fresh cards. Returns cards dealt."""
        self.hand.clear()
        for _ in range(hand_size):
            if not self.take_card(deck):
                break
        return len(self.hand)

    # Turn actions

    def play_card(self, position: int, board: Board) -> tuple[bool, bool, Card]:
        """
        Play a card onto the board.

        The card leaves the hand whether or not it could be placed.

        Returns:
            (was_placed, was_risked, card)
        """
        is_risked = not self.can_guess_a_card(position, board)
        card = self.hand[position].card
        placed = board.put_card(card)
        self._remove_card_at_position(position)
        return placed, is_risked, card

    def drop_card(self, position: int) -> Card:
        card = self.hand[position].card
        self._remove_card_at_position(position)
        return card

    def _remove_card_at_position(self, position: int) -> None:
        del self.hand[position]

    # Deduction

    def can_guess_a_card(self, position: int, board: Board) -> bool:
        """Whether the holder has enough information to play this card safely."""
        slot = self.hand[position]
        card = slot.card
        knowledge = slot.knowledge
        info = card.info

        if knowledge == CardKnowledge.KNOWS_ALL:
            return True

        knows_rank = knowledge == CardKnowledge.KNOWS_RANK
        # Every stack waits for this rank, so any color fits
        if knows_rank and board.is_all_toppings_equals(card.rank - 1):
            return True
        if knows_rank and card.rank == 1 and board.is_empty():
            return True
        # Elimination left a single candidate
        if not knows_rank and len(info.possible_ranks) == 1:
            return True
        if knowledge != CardKnowledge.KNOWS_COLOR and len(info.possible_colors) == 1:
            return True
        if knows_rank and self._is_subset(card, board):
            return True
        return False

    def _is_subset(self, card: Card, board: Board) -> bool:
        """Every color the card could still be is playable at its rank."""
        board_colors = board.get_colors_with_top_rank(card.rank - 1)
        return not (card.info.possible_colors - board_colors)

    # Hints

    def tell_color(
        self, color: Color, opponent: "Player", positions: list[int]
    ) -> tuple[bool, str | None]:
        """Tell the opponent which of their cards are this color."""
        return self._tell(
            opponent,
            positions,
            matches=lambda card: card.color == color,
            eliminate=lambda info: info.possible_colors.discard(color),
            remember=opponent.remember_card_color,
        )

    def tell_rank(
        self, rank: int, opponent: "Player", positions: list[int]
    ) -> tuple[bool, str | None]:
        """Tell the opponent which of their cards have this rank."""
        return self._tell(
            opponent,
            positions,
            matches=lambda card: card.rank == rank,
            eliminate=lambda info: info.possible_ranks.discard(rank),
            remember=opponent.remember_card_rank,
        )

    def _tell(
        self,
        opponent: "Player",
        positions: list[int],
        matches: Callable[[Card], bool],
        eliminate: Callable[[CardInfo], None],
        remember: Callable[[int], None],
    ) -> tuple[bool, str | None]:
        # Validate the whole claim before touching any state
        is_valid, error = validate_hint(opponent.hand, positions, matches)
        if not is_valid:
            return False, error

        claimed = set(positions)
        for position, slot in enumerate(opponent.hand):
            if position not in claimed:
                eliminate(slot.card.info)
        for position in sorted(claimed):
            remember(position)
        return True, None

    def remember_card_color(self, position: int) -> None:
        slot = self.hand[position]
        if slot.knowledge == CardKnowledge.KNOWS_NOTHING:
            slot.knowledge = CardKnowledge.KNOWS_COLOR
        elif slot.knowledge == CardKnowledge.KNOWS_RANK:
            slot.knowledge = CardKnowledge.KNOWS_ALL

    def remember_card_rank(self, position: int) -> None:
        slot = self.hand[position]
        if slot.knowledge == CardKnowledge.KNOWS_NOTHING:
            slot.knowledge = CardKnowledge.KNOWS_RANK
        elif slot.knowledge == CardKnowledge.KNOWS_COLOR:
            slot.knowledge = CardKnowledge.KNOWS_ALL
