from __future__ import annotations

import uuid
from decimal import Decimal


def new_uuid() -> str:
    """Generated primary key (36-char UUID4 string, portable across backends)."""
    return str(uuid.uuid4())


def money_str(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return f"{Decimal(value):.2f}"
