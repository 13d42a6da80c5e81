from decimal import Decimal

import pytest

from storefront.core.errors import InvalidQuantity, ProductNotFound
from storefront.services.cart import (
    add_to_cart,
    cart_total,
    clear_cart,
    get_cart,
    item_count,
    remove_from_cart,
    replace_cart,
    update_quantity,
)
from storefront.services.profiles import get_profile, update_profile


def test_add_merges_into_existing_line(store, make_product):
    product = make_product(price="12.50")

    add_to_cart(store, "user-1", product.id)
    items = add_to_cart(store, "user-1", product.id, 2)

    assert len(items) == 1
    assert items[0].quantity == 3
    assert cart_total(items) == Decimal("37.50")
    assert item_count(items) == 3


def test_add_unknown_product(store):
    with pytest.raises(ProductNotFound):
        add_to_cart(store, "user-1", "missing")


@pytest.mark.parametrize("quantity", [0, -1, "two", 1.5, "2.5", None])
def test_add_rejects_bad_quantity(store, make_product, quantity):
    product = make_product()

    with pytest.raises(InvalidQuantity):
        add_to_cart(store, "user-1", product.id, quantity)


def test_update_quantity_and_remove_on_zero(store, make_product):
    product = make_product()
    add_to_cart(store, "user-1", product.id)

    assert update_quantity(store, "user-1", product.id, 4)[0].quantity == 4
    assert update_quantity(store, "user-1", product.id, 0) == []


def test_update_quantity_rejects_fractions_and_keeps_line(store, make_product):
    product = make_product()
    add_to_cart(store, "user-1", product.id, 2)

    with pytest.raises(InvalidQuantity):
        update_quantity(store, "user-1", product.id, 0.5)

    assert [item.quantity for item in get_cart(store, "user-1")] == [2]


def test_whole_number_strings_are_accepted(store, make_product):
    product = make_product()

    items = add_to_cart(store, "user-1", product.id, "3")

    assert items[0].quantity == 3


def test_update_quantity_of_missing_line_is_noop(store, make_product):
    product = make_product()

    assert update_quantity(store, "user-1", product.id, 2) == []


def test_carts_are_per_identity(store, make_product):
    product = make_product()
    add_to_cart(store, "user-1", product.id)
    add_to_cart(store, "user-2", product.id, 5)

    remove_from_cart(store, "user-2", product.id)

    assert [item.quantity for item in get_cart(store, "user-1")] == [1]
    assert get_cart(store, "user-2") == []


def test_replace_cart_merges_duplicate_lines(store, make_product):
    beans = make_product("Colombian Supremo", "16.50")
    dripper = make_product("Pour-Over Dripper", "24.00")
    add_to_cart(store, "user-1", dripper.id)

    items = replace_cart(store, "user-1", [(beans.id, 1), (beans.id, 2)])

    assert [(item.product_id, item.quantity) for item in items] == [(beans.id, 3)]


def test_replace_cart_with_unknown_product_keeps_old_cart(store, make_product):
    product = make_product()
    add_to_cart(store, "user-1", product.id)

    with pytest.raises(ProductNotFound):
        replace_cart(store, "user-1", [("missing", 1)])

    assert len(get_cart(store, "user-1")) == 1


def test_clear_cart(store, make_product):
    add_to_cart(store, "user-1", make_product().id)

    assert clear_cart(store, "user-1") == []
    assert get_cart(store, "user-1") == []


def test_profile_created_on_first_read_and_updated(store):
    profile = get_profile(store, "user-1")
    assert profile.id == "user-1"
    assert profile.first_name is None

    updated = update_profile(store, "user-1", first_name=" Ada ", phone_text="555-0100", last_name=None)

    assert updated.first_name == "Ada"
    assert updated.phone_text == "555-0100"
    assert updated.last_name is None
