from __future__ import annotations

from urllib.parse import quote, unquote_plus

from listquery.services.reserved import SEARCH_COLUMNS_SEPARATOR


def _segment_key(segment: str) -> str:
    name, _, _ = unquote_plus(segment).partition("=")
    return name.strip().lower()


def add_scope_filter(query: str | None, field_name: str, value, operator: str = "eq") -> str:
    """Return ``query`` with a mandatory ``field_name=value||operator`` filter.

    A filter the client sent for the same field is dropped, so the scope
    (tenant, organization, owner) always wins.
    """
    text = str(query or "").lstrip("?")
    target = field_name.strip().lower()
    kept = [segment for segment in text.split("&") if segment and _segment_key(segment) != target]
    kept.append(f"{field_name}={quote(str(value), safe='')}{SEARCH_COLUMNS_SEPARATOR}{operator}")
    return "&".join(kept)
