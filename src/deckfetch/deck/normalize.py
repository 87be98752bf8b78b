"""Image URL normalization.

Deck exports point at the large JPEG rendition of a card with a cache-busting
query string. Downloads always want the PNG rendition without the query.
"""


def normalize_image_url(raw: str) -> str:
    """Map a raw image URL to its canonical downloadable form.

    Rules, applied in order:
    1. every ``large`` becomes ``png``
    2. every ``.jpg`` becomes ``.png``
    3. anything from the first ``?`` on is dropped

    Examples:
        >>> normalize_image_url("https://x/large/card.jpg?123")
        'https://x/png/card.png'
        >>> normalize_image_url("https://x/small/card.png")
        'https://x/small/card.png'
    """
    url = raw.replace("large", "png").replace(".jpg", ".png")
    return url.split("?", 1)[0]
