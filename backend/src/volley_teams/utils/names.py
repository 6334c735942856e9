"""Player display-name helpers."""

from typing import Optional


def format_short_name(first: Optional[str], last: Optional[str]) -> str:
    """Format a player's name as "First L.".

    Only the first token of a multi-part first name is kept and the last name
    is reduced to its initial, e.g. ("Isabel Cristina", "Bruda Plasencia")
    becomes "Isabel B.". Falls back to "Unknown" when both parts are empty.
    """
    tokens = (first or "").split()
    first_token = tokens[0] if tokens else ""
    last_clean = (last or "").strip()
    last_initial = f"{last_clean[0].upper()}." if last_clean else ""
    name = " ".join(part for part in (first_token, last_initial) if part)
    return name or "Unknown"
