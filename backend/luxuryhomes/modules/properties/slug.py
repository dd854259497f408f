from typing import Optional
import re

# Canonical listing identifier, anchored at the start of the route segment
LISTING_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def resolve_slug(segment: Optional[str]) -> Optional[str]:
    """Extract the listing id from a "<id>-<title>" route segment.

    Matching ignores case, but the id comes back exactly as written.
    """
    if not segment:
        return None
    match = LISTING_ID_PATTERN.match(segment)
    return match.group(0) if match else None


def build_slug(property_id: str, title: Optional[str] = None) -> str:
    """Inverse of resolve_slug: "<id>-<readable-title>" """
    readable = _NON_ALPHANUMERIC.sub("-", (title or "").lower()).strip("-")
    return f"{property_id}-{readable}" if readable else property_id
