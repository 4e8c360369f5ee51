"""
Catalog tests: product CRUD and the category rules.
"""

from decimal import Decimal

import pytest

from propos.errors import ConflictError, NotFoundError, ValidationError
from propos.models import Category, Product
from propos.services import catalog_service, sales_service
from propos.services.sales_service import Cart


class TestProducts:

    def test_create_and_update_product(self, db_session):
        product = catalog_service.create_product(patch={
            "name": "Cappuccino Royale", "category": "Coffee", "price": Decimal("4.50"),
        })
        assert product.stock == 0

        updated = catalog_service.update_product(product_id=product.id, patch={"stock": 28})
        assert updated.stock == 28
        assert updated.price == Decimal("4.50")

    def test_update_missing_product(self, db_session):
        with pytest.raises(NotFoundError):
            catalog_service.update_product(product_id="missing", patch={"stock": 1})

    def test_delete_product_keeps_sales_history(self, db_session, cashier, open_shift, espresso):
        cart = Cart()
        cart.add_product(espresso, 1)
        tx = sales_service.commit_sale(open_shift.id, cashier.id, cart, "cash")

        catalog_service.delete_product(product_id=espresso.id)

        assert db_session.get(Product, espresso.id) is None
        items = sales_service.get_transaction_items(tx.id)
        assert items[0].product_name == "Espresso Intenso"
        assert items[0].price == Decimal("3.50")


class TestCategories:

    def test_duplicate_name_conflicts(self, coffee_category):
        with pytest.raises(ConflictError):
            catalog_service.create_category("Coffee")

    def test_names_are_case_sensitive(self, coffee_category):
        created = catalog_service.create_category("coffee")
        assert created.name == "coffee"

    def test_blank_name_rejected(self, db_session):
        with pytest.raises(ValidationError):
            catalog_service.create_category("   ")

    def test_list_sorted_by_name(self, db_session):
        for name in ["Tea", "Bakery", "Coffee"]:
            catalog_service.create_category(name)
        assert [c.name for c in catalog_service.list_categories()] == ["Bakery", "Coffee", "Tea"]

    def test_delete_blocked_while_products_reference_it(self, db_session, coffee_category, espresso):
        for _ in range(2):
            with pytest.raises(ConflictError):
                catalog_service.delete_category(coffee_category.id)
        assert db_session.get(Category, coffee_category.id) is not None

        catalog_service.update_product(product_id=espresso.id, patch={"category": "Tea"})
        catalog_service.delete_category(coffee_category.id)
        assert db_session.get(Category, coffee_category.id) is None

    def test_delete_unknown_category(self, db_session):
        with pytest.raises(NotFoundError):
            catalog_service.delete_category("missing")
