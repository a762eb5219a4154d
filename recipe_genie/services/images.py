from __future__ import annotations

import logging
from typing import Sequence
from urllib.parse import quote

log = logging.getLogger("images")

IMAGE_SEARCH_URL = "https://source.unsplash.com/featured/?food,{query}"
FALLBACK_IMAGE_URL = "https://source.unsplash.com/random/600x400/?food"


def ingredient_query(ingredients: Sequence[str], limit: int = 2) -> str:
    """'Fresh Basil Leaves', 'Roma Tomatoes' -> 'fresh,roma'"""
    return ",".join(item.split()[0].lower() for item in list(ingredients)[:limit])


class ImageResolver:
    """Placeholder images from a search URL; no image is generated."""

    def __init__(self, search_url: str = IMAGE_SEARCH_URL, fallback_url: str = FALLBACK_IMAGE_URL) -> None:
        self.search_url = search_url
        self.fallback_url = fallback_url

    async def resolve(self, title: str | None, ingredients: Sequence[str] | None) -> str:
        try:
            query = ingredient_query(ingredients)  # type: ignore[arg-type]
            return self.search_url.format(query=quote(query))
        except Exception:
            log.warning("images.fallback title=%r", title, exc_info=True)
            return self.fallback_url
