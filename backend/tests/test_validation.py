"""
Payload validation tests.

Verifies:
- Policy allowlist and required fields
- Column-type coercion for catalog writes
"""

from decimal import Decimal

import pytest

from propos.errors import ValidationError
from propos.models import Product
from propos.validation import ModelValidationPolicy, validate_payload, parse_money


class TestValidatePayload:

    def test_policy_without_required_fields_accepts_create(self):
        policy = ModelValidationPolicy(writable_fields={"name", "stock"})

        assert policy.required_on_create == set()
        patch = validate_payload(model=Product, payload={"stock": "7"}, policy=policy, partial=False)
        assert patch == {"stock": 7}

    def test_policies_do_not_share_required_set(self):
        a = ModelValidationPolicy(writable_fields={"name"})
        b = ModelValidationPolicy(writable_fields={"name"})
        assert a.required_on_create is not b.required_on_create

    def test_coerces_catalog_columns(self):
        policy = ModelValidationPolicy(
            writable_fields={"name", "category", "price", "stock"},
            required_on_create={"name", "category", "price"},
        )
        patch = validate_payload(
            model=Product,
            payload={"name": "  Latte ", "category": "Coffee", "price": 4.5, "stock": 3},
            policy=policy,
            partial=False,
        )
        assert patch == {"name": "Latte", "category": "Coffee", "price": Decimal("4.50"), "stock": 3}

    @pytest.mark.parametrize("payload", [
        {"name": True},
        {"stock": "1.5"},
        {"stock": 2.0},
        {"price": "NaN"},
        {"name": None},
    ])
    def test_rejects_bad_values(self, payload):
        policy = ModelValidationPolicy(writable_fields={"name", "price", "stock"})
        with pytest.raises(ValidationError):
            validate_payload(model=Product, payload=payload, policy=policy, partial=True)


def test_parse_money_rounds_half_up():
    assert parse_money("2.005", "price") == Decimal("2.01")
