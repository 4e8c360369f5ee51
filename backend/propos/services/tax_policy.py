# Overview: Store tax policy; computes the precomputed tax handed to the sale commit.

from __future__ import annotations

from decimal import Decimal

from flask import current_app

from ..validation import quantize_money


def compute_tax(subtotal: Decimal, *, enabled: bool | None = None, rate_percent=None) -> Decimal:
    """
    Tax on a subtotal under the configured policy (TAX_ENABLED, TAX_RATE_PERCENT).

    Explicit arguments override the app config. Disabled tax yields 0.00.
    """
    if enabled is None:
        enabled = current_app.config.get("TAX_ENABLED", False)
    if not enabled:
        return Decimal("0.00")
    if rate_percent is None:
        rate_percent = current_app.config.get("TAX_RATE_PERCENT", 0)
    rate = Decimal(str(rate_percent))
    return quantize_money(Decimal(subtotal) * rate / Decimal(100))
