# backend/propos/services/catalog_service.py
"""
Catalog Service - products and categories

Plain CRUD plus two cross-entity rules:
- Category names are unique (case-sensitive)
- A category cannot be deleted while any product carries its name
"""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError, NotFoundError, ValidationError
from ..extensions import db
from ..models import Product, Category
from ..time_utils import utcnow

PRODUCT_MUTABLE_FIELDS = {"name", "category", "price", "stock", "image"}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


# =============================================================================
# PRODUCTS
# =============================================================================

def list_products() -> list[Product]:
    """All products, newest first."""
    return (
        db.session.query(Product)
        .order_by(Product.created_at.desc(), Product.name.asc())
        .all()
    )


def get_product(product_id: str) -> Product | None:
    return db.session.get(Product, product_id)


def require_product(product_id: str) -> Product:
    product = get_product(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product


def create_product(*, patch: dict) -> Product:
    """Create product from a validated patch dict."""
    p = Product()
    apply_product_patch(p, patch)
    if p.stock is None:
        p.stock = 0

    db.session.add(p)
    db.session.commit()
    return p


def update_product(*, product_id: str, patch: dict) -> Product:
    p = require_product(product_id)
    apply_product_patch(p, patch)
    p.updated_at = utcnow()
    db.session.commit()
    return p


def delete_product(*, product_id: str) -> None:
    """
    Delete a product.

    Transaction items keep their own name/price snapshot, so sales history
    is unaffected.
    """
    p = require_product(product_id)
    db.session.delete(p)
    db.session.commit()


# =============================================================================
# CATEGORIES
# =============================================================================

def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.name.asc()).all()


def create_category(name: str) -> Category:
    """
    Create a category.

    Raises:
        ValidationError: blank name
        ConflictError: a category with exactly this name exists
    """
    name = (name or "").strip() if isinstance(name, str) else None
    if not name:
        raise ValidationError("name is required")
    if len(name) > 128:
        raise ValidationError("name exceeds max length 128")

    existing = db.session.query(Category).filter(Category.name == name).first()
    if existing:
        raise ConflictError("Category already exists")

    category = Category(name=name)
    db.session.add(category)
    try:
        db.session.commit()
    except IntegrityError:
        # Concurrent insert won the unique constraint
        db.session.rollback()
        raise ConflictError("Category already exists")
    return category


def count_products_in_category(name: str) -> int:
    return db.session.query(Product).filter(Product.category == name).count()


def delete_category(category_id: str) -> None:
    """
    Delete a category.

    Raises:
        NotFoundError: unknown id
        ConflictError: products still reference the category name
    """
    category = db.session.get(Category, category_id)
    if not category:
        raise NotFoundError("Category not found")

    in_use = count_products_in_category(category.name)
    if in_use:
        raise ConflictError(
            f"Category '{category.name}' is used by {in_use} product(s); "
            "reassign or delete them first",
            details={"category": category.name, "product_count": in_use},
        )

    db.session.delete(category)
    db.session.commit()
