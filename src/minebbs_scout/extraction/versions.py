# ABOUTME: Parses pages of the game version catalog into GameVersion records
# ABOUTME: A malformed item is skipped, a page with no items at all is an error

from datetime import UTC, datetime

from pydantic import JsonValue

from minebbs_scout.extraction.base import MalformedPayload
from minebbs_scout.extraction.html import absolute_url
from minebbs_scout.extraction.json_fields import resolve, resolve_int, resolve_text
from minebbs_scout.models.detail import GameVersion, VersionPage
from minebbs_scout.utils.logging import get_logger

SHARE_URL = "https://mc.minebbs.com/version/{id}"
CATALOG_FILTERS = {"platform": 3, "environment": 1}

logger = get_logger(__name__)


def _as_int(value: JsonValue) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def format_date(timestamp: JsonValue) -> str:
    """Unix seconds to ``YYYY-MM-DD`` in UTC, empty when unreadable."""
    seconds = _as_int(timestamp)
    if seconds is None:
        return ""
    try:
        return datetime.fromtimestamp(seconds, tz=UTC).strftime("%Y-%m-%d")
    except (OverflowError, OSError, ValueError):
        return ""


def format_size(size: JsonValue) -> str:
    """Bytes to whole megabytes, e.g. ``"812 MB"``. Empty when unreadable."""
    size_bytes = _as_int(size)
    if size_bytes is None:
        return ""
    return f"{size_bytes / 1024 / 1024:.0f} MB"


def parse_version(item: JsonValue) -> GameVersion:
    """Project one catalog item.

    Raises:
        MalformedPayload: If the item is not an object
    """
    if not isinstance(item, dict):
        raise MalformedPayload(f"Version item is not an object: {type(item).__name__}")

    raw_links = resolve(item, ["downloadlinks"])
    # Protocol-relative links get https
    links = [absolute_url(link, "") for link in raw_links if isinstance(link, str)] if isinstance(raw_links, list) else []
    version_id = resolve_text(item, ["id"])
    return GameVersion(
        version=resolve_text(item, ["version"], default="未知版本"),
        downloads=resolve_text(item, ["total_download_count"], default="0"),
        description=resolve_text(item, ["log", "abstract"], default="暂无更新说明"),
        date=format_date(resolve(item, ["time"])),
        size=format_size(resolve(item, ["size"])),
        download_url=links[0] if links else "",
        mirror_url=links[1] if len(links) > 1 else "",
        share_url=SHARE_URL.format(id=version_id) if version_id else "",
    )


def parse_version_page(payload: JsonValue, page: int = 1) -> VersionPage:
    """Project one catalog response into a VersionPage.

    Raises:
        MalformedPayload: If the response carries no version items
    """
    items = resolve(payload, ["data"])
    if not isinstance(items, list) or not items:
        raise MalformedPayload("No version data in catalog response")

    versions = []
    for index, item in enumerate(items):
        try:
            versions.append(parse_version(item))
        except (MalformedPayload, ValueError) as e:
            logger.warning("Skipping unreadable version item", index=index, error=str(e))

    total_pages = max(resolve_int(payload, ["totalPages", "total_pages"], default=1), 1)
    return VersionPage(page=max(page, 1), total_pages=total_pages, versions=tuple(versions))
