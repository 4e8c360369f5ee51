"""
Sales Service - cart and sale commit

WHY: A sale touches four tables (transactions, transaction_items, shifts,
products). The commit either applies all of it or none of it.

The cart is an explicit value object built per request and handed to
commit_sale; the service keeps no ambient cart state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from flask import current_app
from sqlalchemy import update

from ..errors import (
    ForbiddenError,
    InsufficientStockError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from ..extensions import db
from ..models import Product, Shift, Transaction, TransactionItem
from ..models.sales import PAYMENT_METHODS
from ..models.shifts import SHIFT_OPEN
from ..time_utils import utcnow
from ..validation import parse_int, parse_money, quantize_money
from .unit_of_work import unit_of_work


# =============================================================================
# CART
# =============================================================================

@dataclass
class CartLine:
    product_id: str
    quantity: int
    unit_price: Decimal
    product_name: str | None = None

    @property
    def line_total(self) -> Decimal:
        return quantize_money(self.unit_price * self.quantity)


@dataclass
class Cart:
    """
    Checkout cart.

    Adding a product already in the cart bumps its quantity; setting a
    quantity to zero or below removes the line.
    """
    lines: list[CartLine] = field(default_factory=list)

    def _find(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def add_product(self, product: Product, quantity: int = 1) -> CartLine:
        line = self._find(product.id)
        if line:
            line.quantity += quantity
            return line
        line = CartLine(
            product_id=product.id,
            quantity=quantity,
            unit_price=quantize_money(Decimal(product.price)),
            product_name=product.name,
        )
        self.lines.append(line)
        return line

    def update_quantity(self, product_id: str, quantity: int) -> None:
        line = self._find(product_id)
        if not line:
            return
        if quantity <= 0:
            self.remove(product_id)
        else:
            line.quantity = quantity

    def remove(self, product_id: str) -> None:
        self.lines = [line for line in self.lines if line.product_id != product_id]

    def clear(self) -> None:
        self.lines = []

    def is_empty(self) -> bool:
        return not self.lines

    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0.00"))

    def quantities_by_product(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for line in self.lines:
            totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
        return totals

    @classmethod
    def from_items(cls, items) -> "Cart":
        """
        Build a cart from API line items:
        [{"productId", "quantity", "price", "productName"?}, ...]
        """
        if not isinstance(items, list):
            raise ValidationError("items must be a list")

        cart = cls()
        for i, raw in enumerate(items):
            if not isinstance(raw, dict):
                raise ValidationError(f"items[{i}] must be an object")
            product_id = raw.get("productId")
            if not product_id or not isinstance(product_id, str):
                raise ValidationError(f"items[{i}].productId is required")
            if "quantity" not in raw:
                raise ValidationError(f"items[{i}].quantity is required")
            if "price" not in raw:
                raise ValidationError(f"items[{i}].price is required")

            quantity = parse_int(raw["quantity"], f"items[{i}].quantity")
            if quantity <= 0:
                raise ValidationError(f"items[{i}].quantity must be > 0")

            line = CartLine(
                product_id=product_id,
                quantity=quantity,
                unit_price=parse_money(raw["price"], f"items[{i}].price"),
                product_name=raw.get("productName") or None,
            )
            if raw.get("total") is not None:
                claimed = parse_money(raw["total"], f"items[{i}].total")
                if claimed != line.line_total:
                    raise ValidationError(
                        f"items[{i}].total does not match price x quantity",
                        details={"expected": f"{line.line_total:.2f}", "received": f"{claimed:.2f}"},
                    )
            cart.lines.append(line)
        return cart


# =============================================================================
# SALE COMMIT
# =============================================================================

def _require_open_shift(shift_id: str, user_id: str) -> Shift:
    shift = db.session.get(Shift, shift_id)
    if not shift:
        raise NotFoundError("Shift not found")
    if shift.user_id != user_id:
        raise ForbiddenError("Shift does not belong to you")
    if not shift.is_open:
        raise InvalidStateError("Cannot add transactions to a closed shift")
    return shift


def _resolve_products(cart: Cart) -> dict[str, Product]:
    """Load every product in the cart and check stock as read (no locks)."""
    products: dict[str, Product] = {}
    for product_id, qty in cart.quantities_by_product().items():
        product = db.session.get(Product, product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        if product.stock < qty:
            raise InsufficientStockError(product.name, requested=qty, available=product.stock)
        products[product_id] = product
    return products


def _check_claimed(field_name: str, claimed, computed: Decimal) -> None:
    if claimed is None:
        return
    claimed = parse_money(claimed, field_name)
    if claimed != computed:
        raise ValidationError(
            f"{field_name} does not match the cart",
            details={"expected": f"{computed:.2f}", "received": f"{claimed:.2f}"},
        )


def commit_sale(
    shift_id: str,
    user_id: str,
    cart: Cart,
    payment_method: str,
    tax=None,
    *,
    claimed_subtotal=None,
    claimed_total=None,
) -> Transaction:
    """
    Finalize a cart into a persisted Transaction.

    Validation happens before any write. The writes (transaction header,
    line items, shift aggregates, product stock) run in one unit of work.

    Stock and shift state are re-checked by the UPDATE statements themselves
    (stock >= quantity, status = open), so two concurrent commits cannot
    oversell a product or post to a shift closed in between.

    Args:
        tax: precomputed tax amount (None means 0.00)
        claimed_subtotal / claimed_total: client-side figures that must match

    Raises:
        ValidationError, NotFoundError, ForbiddenError,
        InvalidStateError, InsufficientStockError
    """
    if payment_method not in PAYMENT_METHODS:
        raise ValidationError(f"paymentMethod must be one of: {', '.join(PAYMENT_METHODS)}")
    if cart.is_empty():
        raise ValidationError("Cannot commit a sale with no items")
    for line in cart.lines:
        if line.quantity <= 0:
            raise ValidationError("Item quantity must be > 0")

    _require_open_shift(shift_id, user_id)
    products = _resolve_products(cart)

    subtotal = cart.subtotal()
    tax_amount = parse_money(tax, "tax") if tax is not None else Decimal("0.00")
    total = subtotal + tax_amount
    _check_claimed("subtotal", claimed_subtotal, subtotal)
    _check_claimed("total", claimed_total, total)

    quantities = cart.quantities_by_product()

    with unit_of_work() as session:
        transaction = Transaction(
            shift_id=shift_id,
            user_id=user_id,
            subtotal=subtotal,
            tax=tax_amount,
            total=total,
            payment_method=payment_method,
            created_at=utcnow(),
        )
        session.add(transaction)
        session.flush()

        for line in cart.lines:
            session.add(TransactionItem(
                transaction_id=transaction.id,
                product_id=line.product_id,
                product_name=products[line.product_id].name,
                quantity=line.quantity,
                price=line.unit_price,
                total=line.line_total,
            ))

        shift_result = session.execute(
            update(Shift)
            .where(Shift.id == shift_id, Shift.status == SHIFT_OPEN)
            .values(
                total_sales=Shift.total_sales + total,
                transaction_count=Shift.transaction_count + 1,
            )
            .execution_options(synchronize_session=False)
        )
        if shift_result.rowcount != 1:
            raise InvalidStateError("Cannot add transactions to a closed shift")

        for product_id, qty in quantities.items():
            stock_result = session.execute(
                update(Product)
                .where(Product.id == product_id, Product.stock >= qty)
                .values(stock=Product.stock - qty)
                .execution_options(synchronize_session=False)
            )
            if stock_result.rowcount != 1:
                product = products[product_id]
                session.refresh(product)
                raise InsufficientStockError(product.name, requested=qty, available=product.stock)

    current_app.logger.info(
        "Transaction %s committed on shift %s: %d item(s), total %s (%s)",
        transaction.id, shift_id, len(cart.lines), total, payment_method,
    )
    return transaction


# =============================================================================
# READ PATHS
# =============================================================================

def get_transaction(transaction_id: str) -> Transaction | None:
    return db.session.get(Transaction, transaction_id)


def list_transactions(limit: int = 50) -> list[Transaction]:
    """Most recent transactions first."""
    return (
        db.session.query(Transaction)
        .order_by(Transaction.created_at.desc())
        .limit(limit)
        .all()
    )


def list_shift_transactions(shift_id: str) -> list[Transaction]:
    return (
        db.session.query(Transaction)
        .filter_by(shift_id=shift_id)
        .order_by(Transaction.created_at.desc())
        .all()
    )


def get_transaction_items(transaction_id: str) -> list[TransactionItem]:
    return (
        db.session.query(TransactionItem)
        .filter_by(transaction_id=transaction_id)
        .all()
    )
