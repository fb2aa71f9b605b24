from unittest import mock

import pytest
from cart.models import Cart, CartItem
from cart.services import CartConflictError, merge_guest_items, normalize_cart_lines, replace_cart_items
from cart.tests.factories import CartFactory, UserFactory
from catalog.tests.factories import ProductFactory
from django.db import DatabaseError


def _item(product_id, quantity, **product):
    return {"product": {"id": product_id, **product}, "quantity": quantity}


@pytest.mark.django_db
def test_replace_creates_cart_lazily_and_computes_totals():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000)
    p2 = ProductFactory(price_cents=25000)

    cart = replace_cart_items(user=user, items=[_item(p1.id, 2), _item(p2.id, 1)])

    assert cart.status == Cart.STATUS_ACTIVE
    assert cart.total_items == 3
    assert cart.total_cents == 225000
    assert cart.currency == "COP"
    assert cart.version == 1
    items = list(cart.items.order_by("id"))
    assert [(i.product_id, i.quantity, i.line_total_cents) for i in items] == [
        (p1.id, 2, 200000),
        (p2.id, 1, 25000),
    ]


@pytest.mark.django_db
def test_replace_is_idempotent_for_same_input():
    user = UserFactory()
    p1 = ProductFactory()
    payload = [_item(p1.id, 2)]

    first = replace_cart_items(user=user, items=payload)
    second = replace_cart_items(user=user, items=payload)

    assert first.pk == second.pk
    assert CartItem.objects.filter(cart=second).count() == 1
    assert second.total_items == 2
    assert second.total_cents == first.total_cents


@pytest.mark.django_db
def test_zero_and_negative_quantities_are_dropped():
    user = UserFactory()
    p1 = ProductFactory()
    p2 = ProductFactory()

    cart = replace_cart_items(user=user, items=[_item(p1.id, 0), _item(p2.id, -3), _item(p2.id, "abc")])

    assert cart.items.count() == 0
    assert cart.total_items == 0
    assert cart.total_cents == 0


@pytest.mark.django_db
def test_unknown_product_keeps_client_snapshot_price():
    user = UserFactory()

    cart = replace_cart_items(user=user, items=[_item("gone", 2, name="Viejo", price=5000, currency="cop")])

    item = cart.items.get()
    assert item.product_id is None
    assert item.unit_price_cents == 5000
    assert item.line_total_cents == 10000
    assert item.snapshot.name == "Viejo"
    assert item.snapshot.currency == "COP"


@pytest.mark.django_db
def test_catalog_price_wins_over_client_snapshot():
    user = UserFactory()
    p1 = ProductFactory(price_cents=100000)

    cart = replace_cart_items(user=user, items=[_item(p1.id, 1, price=1)])

    assert cart.items.get().unit_price_cents == 100000


@pytest.mark.django_db
def test_replace_leaves_single_active_cart():
    user = UserFactory()
    older = CartFactory(user=user)
    newer = CartFactory(user=user)
    p1 = ProductFactory()

    cart = replace_cart_items(user=user, items=[_item(p1.id, 1)])

    assert Cart.objects.filter(user=user, status=Cart.STATUS_ACTIVE).count() == 1
    assert cart.pk in {older.pk, newer.pk}
    other = older if cart.pk == newer.pk else newer
    other.refresh_from_db()
    assert other.status == Cart.STATUS_ABANDONED


@pytest.mark.django_db
def test_stale_version_is_rejected_without_changes():
    user = UserFactory()
    p1 = ProductFactory()
    p2 = ProductFactory()
    cart = replace_cart_items(user=user, items=[_item(p1.id, 1)])

    with pytest.raises(CartConflictError):
        replace_cart_items(user=user, items=[_item(p2.id, 4)], expected_version=cart.version - 1)

    cart.refresh_from_db()
    assert [i.product_id for i in cart.items.all()] == [p1.id]
    assert cart.version == 1


@pytest.mark.django_db
def test_normalize_folds_duplicate_products_into_one_line():
    p1 = ProductFactory(price_cents=1000)

    lines = normalize_cart_lines([_item(p1.id, 1), _item(p1.id, 2)])

    assert len(lines) == 1
    assert lines[0].quantity == 3
    assert lines[0].line_total_cents == 3000


@pytest.mark.django_db
def test_merge_guest_items_sums_and_clamps_to_stock():
    user = UserFactory()
    p1 = ProductFactory(stock=5)
    replace_cart_items(user=user, items=[_item(p1.id, 3)])

    cart = merge_guest_items(user=user, guest_items=[_item(p1.id, 4)])

    item = cart.items.get()
    assert item.quantity == 5
    assert cart.total_items == 5


@pytest.mark.django_db
def test_merge_with_empty_guest_cart_writes_nothing():
    user = UserFactory()
    p1 = ProductFactory()
    cart = replace_cart_items(user=user, items=[_item(p1.id, 2)])

    result = merge_guest_items(user=user, guest_items=[])

    assert result.pk == cart.pk
    result.refresh_from_db()
    assert result.version == cart.version


@pytest.mark.django_db
def test_failed_replace_keeps_previous_lines_and_totals():
    user = UserFactory()
    p1 = ProductFactory(price_cents=1000)
    p2 = ProductFactory(price_cents=5000)
    cart = replace_cart_items(user=user, items=[_item(p1.id, 2)])

    with mock.patch.object(CartItem.objects, "bulk_create", side_effect=DatabaseError("disk full")):
        with pytest.raises(DatabaseError):
            replace_cart_items(user=user, items=[_item(p2.id, 3)])

    cart.refresh_from_db()
    assert [(i.product_id, i.quantity) for i in cart.items.all()] == [(p1.id, 2)]
    assert cart.total_items == 2
    assert cart.total_cents == 2000
    assert cart.version == 1
