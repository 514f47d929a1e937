"""
Tests for OrderService outside HTTP
"""

import re

import pytest

from bookstore.core.exceptions import DuplicateOrderError, TotalMismatchError
from bookstore.models import OrderRequest
from bookstore.services import OrderService, generate_order_id


def make_request(customer, book, quantity, total):
    return OrderRequest.model_validate({
        "customer": customer,
        "items": [{"bookId": book.id, "quantity": quantity}],
        "totalPrice": total,
    })


@pytest.fixture
def service(book_db, order_db):
    return OrderService(book_db=book_db, order_db=order_db)


class TestOrderIds:

    def test_format(self):
        assert re.match(r"^ORD-\d{13}-[0-9A-F]{9}$", generate_order_id())

    def test_unique(self):
        assert len({generate_order_id() for _ in range(200)}) == 200

    @pytest.mark.asyncio
    async def test_colliding_id_is_rejected(self, book_db, order_db, customer, gatsby):
        service = OrderService(book_db, order_db, id_factory=lambda: "ORD-1-AAAAAAAAA")
        first, _ = await service.create_order(make_request(customer, gatsby, 1, 12.99))

        with pytest.raises(DuplicateOrderError):
            await service.create_order(make_request(customer, gatsby, 2, 25.98))

        assert order_db.get_order("ORD-1-AAAAAAAAA") is first
        assert len(order_db.orders) == 1


class TestCreateOrder:

    @pytest.mark.asyncio
    async def test_returns_created_flag(self, service, customer, gatsby):
        order, created = await service.create_order(make_request(customer, gatsby, 2, 25.98))

        assert created is True
        assert order.total_items == 2
        assert order.total_price == pytest.approx(25.98)
        assert order.created_at == order.updated_at

    @pytest.mark.asyncio
    async def test_replay_by_key(self, service, customer, gatsby):
        first, _ = await service.create_order(make_request(customer, gatsby, 1, 12.99), idempotency_key="k1")
        again, created = await service.create_order(make_request(customer, gatsby, 1, 12.99), idempotency_key="k1")

        assert created is False
        assert again.order_id == first.order_id

    @pytest.mark.asyncio
    async def test_custom_tolerance(self, book_db, order_db, customer, gatsby):
        service = OrderService(book_db, order_db, price_tolerance=0.5)

        order, _ = await service.create_order(make_request(customer, gatsby, 2, 26.30))
        assert order.total_price == pytest.approx(25.98)

        with pytest.raises(TotalMismatchError) as exc_info:
            await service.create_order(make_request(customer, gatsby, 2, 27.00))
        assert exc_info.value.to_response()["calculatedTotal"] == pytest.approx(25.98)


class TestPostCommitHooks:

    @pytest.mark.asyncio
    async def test_hooks_run_in_order_after_persist(self, book_db, order_db, customer, gatsby):
        seen = []

        async def first(order):
            seen.append(("first", order.order_id in order_db.orders))

        async def second(order):
            seen.append(("second", order.order_id in order_db.orders))

        service = OrderService(book_db, order_db, post_commit_hooks=[first])
        service.add_post_commit_hook(second)

        await service.create_order(make_request(customer, gatsby, 1, 12.99))

        assert seen == [("first", True), ("second", True)]

    @pytest.mark.asyncio
    async def test_failures_are_isolated(self, book_db, order_db, customer, gatsby):
        seen = []

        async def broken(order):
            raise ConnectionError("mail server unreachable")

        async def record(order):
            seen.append(order.order_id)

        service = OrderService(book_db, order_db, post_commit_hooks=[broken, record, broken])

        order, created = await service.create_order(make_request(customer, gatsby, 1, 12.99))

        assert created is True
        assert seen == [order.order_id]
        assert order_db.get_order(order.order_id) is order

    @pytest.mark.asyncio
    async def test_hooks_skipped_on_replay(self, book_db, order_db, customer, gatsby):
        seen = []

        async def record(order):
            seen.append(order.order_id)

        service = OrderService(book_db, order_db, post_commit_hooks=[record])
        request = make_request(customer, gatsby, 1, 12.99)

        await service.create_order(request, idempotency_key="same")
        await service.create_order(request, idempotency_key="same")

        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_hooks_skipped_on_rejection(self, book_db, order_db, customer, gatsby):
        seen = []

        async def record(order):
            seen.append(order.order_id)

        service = OrderService(book_db, order_db, post_commit_hooks=[record])

        with pytest.raises(TotalMismatchError):
            await service.create_order(make_request(customer, gatsby, 1, 1.00))

        assert seen == []
