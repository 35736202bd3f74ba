# ABOUTME: Generates plausible entity identifiers from a forum URL
# ABOUTME: Numeric ids come first, the full slug follows as a fallback for backends that need it

import re

from minebbs_scout.models.detail import EntityType

SEGMENTS: dict[EntityType, str] = {
    "resource": "resources",
    "thread": "threads",
}

# Trailing ".14080" or ".14080/" at the end of the URL
_TRAILING_NUMERIC = re.compile(r"\.(\d+)/?$")


def candidates(url: str, segment: str) -> list[str]:
    """Return candidate identifiers for ``url`` in probing order.

    Example: ``.../resources/title-name.1234/`` gives ``["1234", "title-name.1234"]``
    and ``.../threads/1234/`` gives ``["1234"]``.

    Args:
        url: Link to a resource or thread page
        segment: Path segment naming the entity kind ("resources" or "threads")

    Returns:
        Deduplicated identifiers, empty when nothing matches
    """
    if not url or not segment:
        return []

    found: list[str] = []
    escaped = re.escape(segment)

    numeric = _TRAILING_NUMERIC.search(url)
    if numeric:
        found.append(numeric.group(1))
    else:
        bare = re.search(rf"/{escaped}/(\d+)/?$", url)
        if bare:
            found.append(bare.group(1))

    slug = re.search(rf"/{escaped}/([^/]+)/?", url)
    if slug:
        found.append(slug.group(1))

    # dict preserves first-seen order
    return list(dict.fromkeys(found))


def detect_entity_type(url: str) -> EntityType | None:
    """Decide which kind of entity a URL points at. Resources win when both segments appear."""
    if not url:
        return None
    if "resources" in url:
        return "resource"
    if "threads" in url:
        return "thread"
    return None


def candidates_for(url: str, entity_type: EntityType) -> list[str]:
    return candidates(url, SEGMENTS[entity_type])
