from __future__ import annotations

from bs4 import BeautifulSoup

_DATA_SCHEME = "data:"

# tag name -> attribute holding the referenced URL
_REFERENCE_ATTRS = (("link", "href"), ("script", "src"))


def extract_references(html: str) -> list[str]:
    """Return link[href] then script[src] values, skipping data: URIs."""
    soup = BeautifulSoup(html, "html.parser")
    out: list[str] = []
    for tag_name, attr in _REFERENCE_ATTRS:
        for tag in soup.find_all(tag_name, attrs={attr: True}):
            value = tag.get(attr)
            if not value or value.startswith(_DATA_SCHEME):
                continue
            out.append(value)
    return out
