"""
deckfetch - download the card images of a deck export.

Turns a deck document (sections of entry references plus an entries
dictionary) into an ordered list of cards, then fetches each card's front
and back images into one directory per card.
"""

__version__ = "1.0.0"
