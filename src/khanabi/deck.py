"""Draw pile for Khanabi."""

from __future__ import annotations

from collections import deque

from pydantic import BaseModel, Field

from .models import Card


class Deck(BaseModel):
    """FIFO draw pile. Cards come out in the order they were added."""

    cards: deque[Card] = Field(default_factory=deque)

    @classmethod
    def from_cards(cls, cards: list[Card]) -> "Deck":
        deck = cls()
        for card in cards:
            deck.add_card(card.model_copy(deep=True))
        return deck

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def get_card(self) -> Card | None:
        """Take the next card, or None when the deck is exhausted."""
        if not self.cards:
            return None
        return self.cards.popleft()

    def is_empty(self) -> bool:
        return not self.cards

    def __len__(self) -> int:
        return len(self.cards)
