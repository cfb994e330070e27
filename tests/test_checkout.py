"""Checkout workflow: preconditions, snapshots, stock guard and rollback."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from cartshop.core.errors import CheckoutConflictError, EmptyCartError, InsufficientStockError
from cartshop.models.cart import CartItem
from cartshop.models.order import Order, OrderItem, OrderStatus
from cartshop.models.product import Product
from cartshop.services import cart as cart_service
from cartshop.services import checkout as checkout_service


def _order_count(db):
    return db.execute(select(func.count(Order.id))).scalar_one()


def _stock(db, product_id):
    db.expire_all()
    return db.get(Product, product_id).stock


class TestCheckoutPreconditions:
    def test_empty_cart_fails_without_creating_order(self, db, user):
        with pytest.raises(EmptyCartError):
            checkout_service.checkout(db, user.id)

        assert _order_count(db) == 0

    def test_insufficient_stock_reports_product_and_quantities(self, db, user, make_product):
        keyboard = make_product("Mechanical Keyboard", "89.99", stock=2)
        cart_service.add_to_cart(db, user.id, keyboard.id, 3)

        with pytest.raises(InsufficientStockError) as exc_info:
            checkout_service.checkout(db, user.id)

        err = exc_info.value
        assert err.product_id == keyboard.id
        assert err.product_name == "Mechanical Keyboard"
        assert err.available == 2
        assert err.requested == 3

    def test_one_short_line_fails_the_whole_checkout(self, db, user, make_product):
        hub = make_product("USB-C Hub", "49.99", stock=25)
        monitor = make_product('Monitor - 27" 4K', "399.99", stock=1)
        cart_service.add_to_cart(db, user.id, hub.id, 2)
        cart_service.add_to_cart(db, user.id, monitor.id, 2)

        with pytest.raises(InsufficientStockError):
            checkout_service.checkout(db, user.id)

        assert _order_count(db) == 0
        assert _stock(db, hub.id) == 25
        assert _stock(db, monitor.id) == 1
        assert cart_service.cart_item_count(db, user.id) == 2


class TestSuccessfulCheckout:
    def test_two_line_cart_total_and_snapshots(self, db, user, make_product):
        p1 = make_product("Laptop Stand", "10.00", stock=5)
        p2 = make_product("Phone Stand", "5.00", stock=5)
        cart_service.add_to_cart(db, user.id, p1.id, 2)
        cart_service.add_to_cart(db, user.id, p2.id, 1)

        order = checkout_service.checkout(db, user.id)

        assert order.total_price == Decimal("25.00")
        assert order.status == OrderStatus.pending.value
        assert order.user_id == user.id
        prices = {item.product_id: (item.quantity, item.price_at_purchase) for item in order.items}
        assert prices == {
            p1.id: (2, Decimal("10.00")),
            p2.id: (1, Decimal("5.00")),
        }

    def test_stock_is_decremented_and_cart_cleared(self, db, user, make_product):
        ssd = make_product("External SSD - 1TB", "119.99", stock=35)
        cart_service.add_to_cart(db, user.id, ssd.id, 4)

        checkout_service.checkout(db, user.id)

        assert _stock(db, ssd.id) == 31
        assert cart_service.get_cart_lines(db, user.id) == []

    def test_total_equals_sum_of_line_subtotals(self, db, user, make_product):
        products = [
            make_product("Wireless Mouse", "29.99", stock=50),
            make_product("Webcam - 1080p", "69.99", stock=40),
            make_product("Phone Stand", "14.99", stock=100),
        ]
        for quantity, product in enumerate(products, start=1):
            cart_service.add_to_cart(db, user.id, product.id, quantity)

        order = checkout_service.checkout(db, user.id)

        assert sum(item.subtotal for item in order.items) == order.total_price
        assert order.total_price == Decimal("29.99") + Decimal("69.99") * 2 + Decimal("14.99") * 3

    def test_price_at_purchase_ignores_later_price_change(self, db, user, make_product):
        headphones = make_product("Headphones - Noise Cancelling", "199.99", stock=20)
        cart_service.add_to_cart(db, user.id, headphones.id, 1)
        order = checkout_service.checkout(db, user.id)

        headphones = db.get(Product, headphones.id)
        headphones.price = Decimal("149.99")
        db.commit()

        db.expire_all()
        item = db.execute(select(OrderItem).where(OrderItem.order_id == order.id)).scalar_one()
        assert item.price_at_purchase == Decimal("199.99")

    def test_uses_current_price_not_price_seen_when_added(self, db, user, make_product):
        mouse = make_product("Wireless Mouse", "29.99", stock=50)
        cart_service.add_to_cart(db, user.id, mouse.id, 1)

        mouse.price = Decimal("24.99")
        db.commit()

        order = checkout_service.checkout(db, user.id)
        assert order.items[0].price_at_purchase == Decimal("24.99")
        assert order.total_price == Decimal("24.99")

    def test_exact_stock_can_be_bought_out(self, db, user, make_product):
        monitor = make_product('Monitor - 27" 4K', "399.99", stock=2)
        cart_service.add_to_cart(db, user.id, monitor.id, 2)

        checkout_service.checkout(db, user.id)

        assert _stock(db, monitor.id) == 0

    def test_other_users_cart_is_untouched(self, db, user, other_user, make_product):
        mouse = make_product("Wireless Mouse", "29.99", stock=50)
        cart_service.add_to_cart(db, user.id, mouse.id, 1)
        cart_service.add_to_cart(db, other_user.id, mouse.id, 3)

        checkout_service.checkout(db, user.id)

        lines = cart_service.get_cart_lines(db, other_user.id)
        assert [line.quantity for line in lines] == [3]


class TestStockGuard:
    def test_decrement_refuses_to_go_negative(self, db, make_product):
        stand = make_product("Laptop Stand", "39.99", stock=1)

        assert checkout_service.decrement_stock(db, stand.id, 2) is False
        assert checkout_service.decrement_stock(db, stand.id, 1) is True
        db.commit()

        assert _stock(db, stand.id) == 0

    def test_stale_precheck_raises_conflict_and_rolls_back(self, db, user, make_product, monkeypatch):
        hub = make_product("USB-C Hub", "49.99", stock=5)
        stand = make_product("Laptop Stand", "39.99", stock=1)
        cart_service.add_to_cart(db, user.id, hub.id, 2)
        cart_service.add_to_cart(db, user.id, stand.id, 3)

        # Pre-check sees nothing wrong, so only the guarded decrement can stop the order
        monkeypatch.setattr(checkout_service, "validate_cart", lambda lines: None)

        with pytest.raises(CheckoutConflictError) as exc_info:
            checkout_service.checkout(db, user.id)

        assert exc_info.value.product_id == stand.id
        assert _order_count(db) == 0
        assert _stock(db, hub.id) == 5
        assert _stock(db, stand.id) == 1
        assert cart_service.cart_item_count(db, user.id) == 2

    def test_last_unit_race_has_exactly_one_winner(
        self, db, session_factory, user, other_user, make_product, monkeypatch
    ):
        lamp = make_product("Desk Lamp", "25.00", stock=1)
        cart_service.add_to_cart(db, user.id, lamp.id, 1)
        cart_service.add_to_cart(db, other_user.id, lamp.id, 1)

        real_validate = checkout_service.validate_cart

        def validate_then_lose_race(lines):
            real_validate(lines)
            # The other buyer commits between our pre-check and our decrement
            monkeypatch.setattr(checkout_service, "validate_cart", real_validate)
            other_session = session_factory()
            try:
                checkout_service.checkout(other_session, other_user.id)
            finally:
                other_session.close()

        monkeypatch.setattr(checkout_service, "validate_cart", validate_then_lose_race)

        with pytest.raises(CheckoutConflictError):
            checkout_service.checkout(db, user.id)

        db.expire_all()
        orders = db.execute(select(Order)).scalars().all()
        assert [o.user_id for o in orders] == [other_user.id]
        assert _stock(db, lamp.id) == 0
        assert [line.quantity for line in cart_service.get_cart_lines(db, user.id)] == [1]
        assert cart_service.get_cart_lines(db, other_user.id) == []

    def test_sequential_checkouts_never_oversell(self, db, user, other_user, make_product):
        lamp = make_product("Desk Lamp", "25.00", stock=1)
        cart_service.add_to_cart(db, user.id, lamp.id, 1)
        cart_service.add_to_cart(db, other_user.id, lamp.id, 1)

        checkout_service.checkout(db, user.id)
        with pytest.raises(InsufficientStockError):
            checkout_service.checkout(db, other_user.id)

        assert _stock(db, lamp.id) == 0
        assert cart_service.cart_item_count(db, other_user.id) == 1


class TestSnapshotCart:
    def test_builds_order_without_touching_session(self, db, user, make_product):
        mouse = make_product("Wireless Mouse", "29.99", stock=50)
        cart_service.add_to_cart(db, user.id, mouse.id, 2)
        lines = cart_service.get_cart_lines(db, user.id)

        order = checkout_service.snapshot_cart(user.id, lines)

        assert order not in db
        assert order.total_price == Decimal("59.98")
        assert [(i.product_id, i.quantity) for i in order.items] == [(mouse.id, 2)]


class TestCheckoutSummary:
    def test_summary_lists_lines_and_total(self, db, user, make_product):
        mouse = make_product("Wireless Mouse", "29.99", stock=50)
        cart_service.add_to_cart(db, user.id, mouse.id, 2)

        summary = checkout_service.checkout_summary(db, user.id)

        assert summary.total == Decimal("59.98")
        assert [line.product_id for line in summary.lines] == [mouse.id]
        assert _order_count(db) == 0

    def test_summary_rejects_empty_cart(self, db, user):
        with pytest.raises(EmptyCartError):
            checkout_service.checkout_summary(db, user.id)

    def test_summary_rejects_short_stock(self, db, user, make_product):
        monitor = make_product('Monitor - 27" 4K', "399.99", stock=1)
        cart_service.add_to_cart(db, user.id, monitor.id, 2)

        with pytest.raises(InsufficientStockError):
            checkout_service.checkout_summary(db, user.id)

        assert db.execute(select(func.count(CartItem.id))).scalar_one() == 1
