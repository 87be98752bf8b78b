"""Card extraction from a deck document.

The document layout (JSON):

    {
      "name": "Mono Red",
      "sections": {"primary": ["mainboard"], "secondary": ["sideboard"]},
      "entries": {
        "mainboard": [
          {"count": 4, "card_digest": {"name": "Lightning Bolt",
                                      "image_uris": {"front": "https://..."}}},
          {"count": 1, "card_digest": null}
        ],
        "sideboard": []
      }
    }

Every field is checked for presence and type once, here. A failed check raises
``DeckParsingError`` naming the dotted path of the field, so a malformed
export is rejected before any download starts.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from deckfetch.core.logging import get_logger
from deckfetch.deck.models import Card, Deck
from deckfetch.deck.normalize import normalize_image_url
from deckfetch.errors import DanglingSectionError, DeckParsingError, ValidationError

logger = get_logger(__name__)

SECTION_KEYS = ("primary", "secondary")


def _require_mapping(value: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise DeckParsingError(field, value, expected="object")
    return value


def _require_list(value: Any, field: str) -> List[Any]:
    if not isinstance(value, list):
        raise DeckParsingError(field, value, expected="array")
    return value


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise DeckParsingError(field, value, expected="string")
    return value


def _require_count(value: Any, field: str) -> int:
    # bool is an int subclass; JSON true/false is not a count
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DeckParsingError(field, value, expected="non-negative integer")
    return value


def _optional_image_url(
    image_uris: Mapping[str, Any], side: str, field: str
) -> Optional[str]:
    raw = image_uris.get(side)
    if raw is None:
        return None
    return normalize_image_url(_require_text(raw, f"{field}.{side}"))


def section_names(document: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """Return the sections to process: ``primary`` then ``secondary``.

    Each item is ``(field, name)`` where ``field`` is the listing position,
    e.g. ``sections.secondary[0]``. Duplicates are kept; a section listed
    twice is processed twice.
    """
    sections = _require_mapping(document.get("sections"), "sections")

    names: List[Tuple[str, str]] = []
    for key in SECTION_KEYS:
        listing = f"sections.{key}"
        for position, name in enumerate(_require_list(sections.get(key), listing)):
            field = f"{listing}[{position}]"
            names.append((field, _require_text(name, field)))
    return names


def card_from_digest(digest: Any, field: str) -> Card:
    """Build one Card from a non-null ``card_digest`` record."""
    digest = _require_mapping(digest, field)
    name = _require_text(digest.get("name"), f"{field}.name")

    image_field = f"{field}.image_uris"
    image_uris = digest.get("image_uris")
    if image_uris is None:
        return Card(name=name)
    image_uris = _require_mapping(image_uris, image_field)

    return Card(
        name=name,
        front_url=_optional_image_url(image_uris, "front", image_field),
        back_url=_optional_image_url(image_uris, "back", image_field),
    )


def _section_cards(section: str, records: List[Any]) -> Iterator[Card]:
    for position, record in enumerate(records):
        field = f"entries.{section}[{position}]"
        record = _require_mapping(record, field)

        digest = record.get("card_digest")
        if digest is None:
            logger.debug("Skipping {}: no card digest", field)
            continue

        count = _require_count(record.get("count"), f"{field}.count")
        card = card_from_digest(digest, f"{field}.card_digest")
        for _ in range(count):
            yield card


def extract_deck(document: Any) -> Deck:
    """Extract a Deck from a parsed deck document.

    Cards come out in processing order: every section in ``primary``, then
    every section in ``secondary``, each in document order. An entry with
    ``count`` N yields N cards. Entries whose ``card_digest`` is null yield
    nothing, whatever their ``count``.

    Args:
        document: Parsed JSON value (normally a dict)

    Returns:
        The extracted Deck

    Raises:
        DeckParsingError: A field is missing or has the wrong type
        DanglingSectionError: A section name has no key in ``entries``

    Examples:
        >>> deck = extract_deck({
        ...     "name": "Burn",
        ...     "sections": {"primary": ["main"], "secondary": []},
        ...     "entries": {"main": [{"count": 2, "card_digest": {
        ...         "name": "Shock",
        ...         "image_uris": {"front": "https://x/large/a.jpg?1"},
        ...     }}]},
        ... })
        >>> [card.front_url for card in deck.cards]
        ['https://x/png/a.png', 'https://x/png/a.png']
    """
    document = _require_mapping(document, "<document>")

    name = _require_text(document.get("name"), "name")
    if not name:
        raise DeckParsingError("name", name, expected="non-empty string")
    if Path(name).is_absolute() or ".." in Path(name).parts:
        raise DeckParsingError("name", name, expected="relative directory name")

    names = section_names(document)
    entries = _require_mapping(document.get("entries"), "entries")

    cards: List[Card] = []
    for field, section in names:
        if section not in entries:
            raise DanglingSectionError(field, section)
        records = _require_list(entries[section], f"entries.{section}")
        cards.extend(_section_cards(section, records))

    logger.debug(
        "Extracted {} cards from {} sections of '{}'", len(cards), len(names), name
    )
    return Deck(name=name, cards=tuple(cards))


def load_deck_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and parse a JSON deck document.

    Raises:
        ValidationError: If the file does not exist or cannot be read
        DeckParsingError: If the file is not valid JSON
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ValidationError(f"Deck file not found: {path}")
    except (OSError, UnicodeDecodeError) as error:
        raise ValidationError(f"Could not read deck file '{path}': {error}")

    try:
        return json.loads(text)
    except json.JSONDecodeError as error:
        raise DeckParsingError(
            str(path),
            error.doc[max(0, error.pos - 20) : error.pos + 20],
            message=(
                f"Invalid JSON in '{path}' at line {error.lineno} "
                f"column {error.colno}: {error.msg}"
            ),
        )


def load_deck(path: Union[str, Path]) -> Deck:
    """Load a deck file and extract its cards."""
    return extract_deck(load_deck_document(path))
