from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import new_uuid, money_str

SHIFT_OPEN = "open"
SHIFT_CLOSED = "closed"


class Shift(db.Model):
    """
    Cashier shift.

    WHY: Cashier accountability. Each shift has opening/closing cash counts
    and running totals of the sales committed against it.

    LIFECYCLE:
    - open: can accept sales
    - closed: terminal, never reopened or mutated again

    At most one open shift per user.
    """
    __tablename__ = "shifts"
    __table_args__ = (
        db.Index("ix_shifts_user_status", "user_id", "status"),
        # One open shift per user, enforced by the database
        db.Index(
            "uq_shifts_user_open",
            "user_id",
            unique=True,
            sqlite_where=db.text("status = 'open'"),
            postgresql_where=db.text("status = 'open'"),
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    start_time = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    end_time = db.Column(db.DateTime, nullable=True)

    start_cash = db.Column(db.Numeric(10, 2), nullable=False)
    end_cash = db.Column(db.Numeric(10, 2), nullable=True)  # Set when closing

    # Running aggregates, written only by the sale commit
    total_sales = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    transaction_count = db.Column(db.Integer, nullable=False, default=0)

    status = db.Column(db.String(16), nullable=False, default=SHIFT_OPEN, index=True)

    user = db.relationship("User", backref=db.backref("shifts", lazy=True))

    @property
    def is_open(self) -> bool:
        return self.status == SHIFT_OPEN

    def __repr__(self) -> str:
        return f"<Shift id={self.id} user_id={self.user_id} status={self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "startTime": to_utc_z(self.start_time),
            "endTime": to_utc_z(self.end_time) if self.end_time else None,
            "startCash": money_str(self.start_cash),
            "endCash": money_str(self.end_cash),
            "totalSales": money_str(self.total_sales),
            "transactionCount": self.transaction_count,
            "status": self.status,
        }
