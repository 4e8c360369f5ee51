# Overview: Service-layer operations for reporting; read-only aggregation over committed sales.

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Transaction, TransactionItem
from ..time_utils import utcnow

DEFAULT_DAY_LABELS = ["Min", "Sen", "Sel", "Rab", "Kam", "Jum", "Sab"]
TOP_CATEGORY_LIMIT = 5


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


def sales_stats(days: int = 7, *, now: datetime | None = None) -> dict:
    """Total revenue and transaction count over the trailing `days` window."""
    now = now or utcnow()
    start = now - timedelta(days=days)

    row = db.session.query(
        func.coalesce(func.sum(Transaction.total), 0).label("total"),
        func.count(Transaction.id).label("count"),
    ).filter(Transaction.created_at >= start).one()

    return {
        "days": days,
        "total": f"{_money(row.total):.2f}",
        "count": int(row.count or 0),
    }


def _day_labels() -> list[str]:
    labels = current_app.config.get("REPORT_DAY_LABELS") or DEFAULT_DAY_LABELS
    if len(labels) != 7:
        return DEFAULT_DAY_LABELS
    return labels


def weekly_sales(*, today: date | None = None) -> list[dict]:
    """
    Revenue per calendar day for the last 7 days (today included),
    oldest first, zero-filled, labelled with Sunday-first day names.
    """
    today = today or utcnow().date()
    first_day = today - timedelta(days=6)
    start = datetime.combine(first_day, datetime.min.time())
    end = datetime.combine(today + timedelta(days=1), datetime.min.time())

    rows = db.session.query(Transaction.created_at, Transaction.total).filter(
        Transaction.created_at >= start,
        Transaction.created_at < end,
    ).all()

    per_day: dict[date, Decimal] = {}
    for created_at, total in rows:
        day = created_at.date()
        per_day[day] = per_day.get(day, Decimal("0.00")) + _money(total)

    labels = _day_labels()
    series = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        # date.weekday() is Monday=0; labels are Sunday-first
        label = labels[(day.weekday() + 1) % 7]
        series.append({
            "name": label,
            "date": day.isoformat(),
            "sales": f"{per_day.get(day, Decimal('0.00')):.2f}",
        })
    return series


def category_sales(limit: int = TOP_CATEGORY_LIMIT) -> list[dict]:
    """
    Top sellers by revenue.

    NOTE: grouped by the product name snapshot on each line item, not by the
    product's category, matching the dashboard's established figures.
    """
    revenue = func.sum(TransactionItem.total)
    rows = (
        db.session.query(
            TransactionItem.product_name.label("name"),
            func.coalesce(revenue, 0).label("total"),
        )
        .group_by(TransactionItem.product_name)
        .order_by(revenue.desc(), TransactionItem.product_name.asc())
        .limit(limit)
        .all()
    )
    return [{"name": row.name, "sales": f"{_money(row.total):.2f}"} for row in rows]
