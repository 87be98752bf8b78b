"""Deck model and the extraction of cards from a deck document."""

from deckfetch.deck.models import Card, Deck
from deckfetch.deck.normalize import normalize_image_url
from deckfetch.deck.extractor import extract_deck, load_deck, load_deck_document

__all__ = [
    "Card",
    "Deck",
    "normalize_image_url",
    "extract_deck",
    "load_deck",
    "load_deck_document",
]
