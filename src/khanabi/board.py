"""The shared board: one stack per color, built upward from a sentinel."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .models import COLORS, MAX_RANK, SENTINEL_RANK, Card, Color


def _sentinel_stacks() -> list[list[Card]]:
    return [[Card(color=color, rank=SENTINEL_RANK)] for color in COLORS]


class Board(BaseModel):
    """Five color stacks. Each stack's ranks go up by exactly one."""

    stacks: list[list[Card]] = Field(default_factory=_sentinel_stacks)

    def _top(self, stack: list[Card]) -> Card:
        return stack[-1]

    def is_full(self) -> bool:
        """True once every stack holds its sentinel and all ranks up to the max."""
        total = sum(len(stack) for stack in self.stacks)
        return total == len(COLORS) * (MAX_RANK + 1)

    def is_empty(self) -> bool:
        return self.is_all_toppings_equals(SENTINEL_RANK)

    def put_card(self, card: Card) -> bool:
        """
        Place a card on its color stack if it extends the stack by one rank.

        Returns:
            True if the card was placed. On False no stack is modified.
        """
        for stack in self.stacks:
            top = self._top(stack)
            if top.color == card.color and top.rank == card.rank - 1:
                stack.append(card)
                return True
        return False

    def is_all_toppings_equals(self, rank: int) -> bool:
        return all(self._top(stack).rank == rank for stack in self.stacks)

    def get_colors_with_top_rank(self, rank: int) -> set[Color]:
        return {self._top(stack).color for stack in self.stacks if self._top(stack).rank == rank}

    def top_ranks(self) -> dict[Color, int]:
        return {self._top(stack).color: self._top(stack).rank for stack in self.stacks}

    def card_count(self) -> int:
        """Number of real cards placed (sentinels excluded)."""
        return sum(len(stack) - 1 for stack in self.stacks)
