from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import new_uuid, money_str

PAYMENT_METHODS = ("cash", "card", "qris", "ewallet")


class Transaction(db.Model):
    """
    A committed sale. Immutable once created.

    WHY: The header row of the sale commit; shift totals are derived from
    the sum of these.
    """
    __tablename__ = "transactions"
    __table_args__ = (
        db.Index("ix_transactions_shift_created", "shift_id", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    shift_id = db.Column(db.String(36), db.ForeignKey("shifts.id"), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    subtotal = db.Column(db.Numeric(10, 2), nullable=False)
    tax = db.Column(db.Numeric(10, 2), nullable=False)
    total = db.Column(db.Numeric(10, 2), nullable=False)

    payment_method = db.Column(db.String(16), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    shift = db.relationship("Shift", backref=db.backref("transactions", lazy=True))
    items = db.relationship(
        "TransactionItem",
        backref="transaction",
        lazy=True,
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_items: bool = False) -> dict:
        data = {
            "id": self.id,
            "shiftId": self.shift_id,
            "userId": self.user_id,
            "subtotal": money_str(self.subtotal),
            "tax": money_str(self.tax),
            "total": money_str(self.total),
            "paymentMethod": self.payment_method,
            "createdAt": to_utc_z(self.created_at),
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class TransactionItem(db.Model):
    """Line item with a name/price snapshot taken at sale time."""
    __tablename__ = "transaction_items"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_transaction_items_quantity_positive"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    transaction_id = db.Column(
        db.String(36),
        db.ForeignKey("transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # No FK: products may be deleted while their history remains
    product_id = db.Column(db.String(36), nullable=False, index=True)
    product_name = db.Column(db.String(255), nullable=False)

    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    total = db.Column(db.Numeric(10, 2), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transactionId": self.transaction_id,
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "price": money_str(self.price),
            "total": money_str(self.total),
        }
