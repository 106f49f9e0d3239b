"""Order token parsing.

An order token is a compact ``"<field>:<direction>"`` string:

    - ``"name:desc"`` - Descending by name
    - ``"name:asc"`` - Ascending by name
    - ``"name"`` - Ascending (direction omitted)

Direction matching is exact and case-sensitive: only the literal ``desc``
sorts descending. ``"name:DESC"`` sorts ascending.
"""

from typing import Literal

Direction = Literal["asc", "desc"]

ORDER_SEPARATOR = ":"


def parse_order_token(token: str) -> tuple[str, Direction]:
    """Split an order token into field and direction.

    Args:
        token: Raw order token (e.g., "name:desc").

    Returns:
        (field_name, direction) tuple. Direction is "asc" or "desc".

    Examples:
        >>> parse_order_token("name:desc")
        ("name", "desc")

        >>> parse_order_token("name:DESC")
        ("name", "asc")

        >>> parse_order_token("created_at:desc:extra")
        ("created_at", "desc")
    """
    # Segments after the direction are ignored.
    field_name, *rest = token.split(ORDER_SEPARATOR)
    direction = rest[0] if rest else ""
    return field_name, "desc" if direction == "desc" else "asc"


def default_order_token(pk: str) -> str:
    """Default order token for a table: ascending primary key."""
    return f"{pk}{ORDER_SEPARATOR}asc"
