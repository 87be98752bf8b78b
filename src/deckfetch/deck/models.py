"""Deck and card value types produced by the extractor."""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Card:
    """One physical card of a deck.

    ``front_url`` and ``back_url`` are canonical (normalized) image URLs, or
    ``None`` when the card has no image for that side.
    """

    name: str
    front_url: Optional[str] = None
    back_url: Optional[str] = None

    @property
    def image_urls(self) -> Tuple[Optional[str], Optional[str]]:
        return (self.front_url, self.back_url)


@dataclass(frozen=True)
class Deck:
    """Represents a complete deck in extraction order."""

    name: str
    cards: Tuple[Card, ...] = field(default_factory=tuple)

    @property
    def card_count(self) -> int:
        """Total cards, one per physical copy."""
        return len(self.cards)

    @property
    def image_count(self) -> int:
        """Number of card sides that carry an image URL."""
        return sum(
            1 for card in self.cards for url in card.image_urls if url is not None
        )
