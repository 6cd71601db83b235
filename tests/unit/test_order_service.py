"""Unit tests for OrderApplicationService using in-memory fakes."""
import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from factories import (
    BUYER_ID,
    OWNER_ID,
    FakeCatalog,
    FakeOrderRepo,
    make_order,
    make_product,
    make_store,
    mock_db,
)
from src.mk_catalog.domain.models import StoreFeeConfig, UserProfile
from src.mk_common.enums import PaymentMethod
from src.mk_common.errors import (
    CodNotAvailableError,
    InvalidQuantityError,
    InvalidTransitionError,
    OrderNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
    StoreNotFoundError,
    UnauthorizedError,
)
from src.mk_order.application.schemas import PlaceOrderRequest
from src.mk_order.application.service import OrderApplicationService
from src.mk_order.domain.state_machine import StatusTransition

_ADDRESS = {
    "type": "home", "street": "12 MG Road", "area": "Indiranagar", "pincode": "560038",
    "city": "Bengaluru", "state": "Karnataka", "country": "India",
}


def _request(**kwargs) -> PlaceOrderRequest:
    data = {
        "product_id": "prod-1", "quantity": 3, "shipping_address": _ADDRESS,
        "payment_method": "COD",
    }
    data.update(kwargs)
    return PlaceOrderRequest(**data)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(
        products=[make_product()],
        stores=[make_store(fee_config=StoreFeeConfig(
            store_charges=Decimal("20"), gst_applicable=True, gst_percentage=Decimal("18"),
            cod_available=True, cod_charges=Decimal("15"),
        ))],
        users=[UserProfile(id=BUYER_ID, name="Ravi", email="ravi@example.com", phone=None)],
    )


@pytest.fixture
def repo() -> FakeOrderRepo:
    return FakeOrderRepo()


@pytest.fixture
def svc(repo: FakeOrderRepo, catalog: FakeCatalog) -> OrderApplicationService:
    return OrderApplicationService(repo=repo, catalog=catalog)


class TestPricePreview:
    @pytest.mark.asyncio
    async def test_preview_breakdown(self, svc: OrderApplicationService) -> None:
        resp = await svc.calculate_price_preview(mock_db(), "prod-1", 3, PaymentMethod.COD)
        assert resp.final_total == Decimal("1805.00")

    @pytest.mark.asyncio
    async def test_preview_equals_placed_order(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        preview = await svc.calculate_price_preview(mock_db(), "prod-1", 3, PaymentMethod.ONLINE)
        placed = await svc.place_order(mock_db(), BUYER_ID, _request(payment_method="online"))
        assert placed.pricing == preview
        assert repo.orders[placed.order_id].final_total == Decimal("1790.00")

    @pytest.mark.asyncio
    async def test_unknown_product(self, svc: OrderApplicationService) -> None:
        with pytest.raises(ProductNotFoundError):
            await svc.calculate_price_preview(mock_db(), "nope", 1, PaymentMethod.ONLINE)

    @pytest.mark.asyncio
    async def test_missing_store(self, catalog: FakeCatalog) -> None:
        catalog.stores.clear()
        svc = OrderApplicationService(repo=FakeOrderRepo(), catalog=catalog)
        with pytest.raises(StoreNotFoundError):
            await svc.calculate_price_preview(mock_db(), "prod-1", 1, PaymentMethod.ONLINE)

    @pytest.mark.asyncio
    async def test_cod_not_offered(self, catalog: FakeCatalog) -> None:
        catalog.stores["store-1"] = make_store(fee_config=StoreFeeConfig(cod_available=False))
        svc = OrderApplicationService(repo=FakeOrderRepo(), catalog=catalog)
        with pytest.raises(CodNotAvailableError):
            await svc.calculate_price_preview(mock_db(), "prod-1", 1, PaymentMethod.COD)


class TestPlaceOrder:
    @pytest.mark.asyncio
    async def test_success(
        self, svc: OrderApplicationService, repo: FakeOrderRepo, catalog: FakeCatalog
    ) -> None:
        db = mock_db()
        resp = await svc.place_order(db, BUYER_ID, _request())

        assert resp.status == "placed"
        assert resp.order_id.startswith("ord_")
        assert resp.pricing.final_total == Decimal("1805.00")
        order = repo.orders[resp.order_id]
        assert order.buyer_id == BUYER_ID
        assert order.unit_price_at_order == Decimal("500.00")
        assert order.payment_method == "COD"
        assert len(order.status_history) == 1
        assert order.status_history[0].status == "placed"
        assert catalog.products["prod-1"].stock_quantity == 7
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_out_of_stock_leaves_nothing_behind(
        self, svc: OrderApplicationService, repo: FakeOrderRepo, catalog: FakeCatalog
    ) -> None:
        db = mock_db()
        with pytest.raises(OutOfStockError) as exc_info:
            await svc.place_order(db, BUYER_ID, _request(quantity=11))
        assert exc_info.value.http_status == 409
        assert repo.orders == {}
        assert catalog.products["prod-1"].stock_quantity == 10
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_race_on_decrement(
        self, svc: OrderApplicationService, catalog: FakeCatalog, repo: FakeOrderRepo
    ) -> None:
        catalog.decrement_stock = AsyncMock(return_value=None)  # type: ignore[method-assign]
        db = mock_db()
        with pytest.raises(OutOfStockError):
            await svc.place_order(db, BUYER_ID, _request())
        assert repo.orders == {}
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_quantity_rejected(self, svc: OrderApplicationService) -> None:
        with pytest.raises(InvalidQuantityError):
            await svc.place_order(mock_db(), BUYER_ID, _request(quantity=0))

    @pytest.mark.asyncio
    async def test_save_failure_rolls_back(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.save = AsyncMock(side_effect=RuntimeError("db down"))  # type: ignore[method-assign]
        db = mock_db()
        with pytest.raises(RuntimeError):
            await svc.place_order(db, BUYER_ID, _request())
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_checkouts_for_last_unit(
        self, repo: FakeOrderRepo, catalog: FakeCatalog
    ) -> None:
        catalog.products["prod-1"].stock_quantity = 1
        svc = OrderApplicationService(repo=repo, catalog=catalog)

        results = await asyncio.gather(
            svc.place_order(mock_db(), "buyer-a", _request(quantity=1)),
            svc.place_order(mock_db(), "buyer-b", _request(quantity=1)),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], OutOfStockError)
        assert len(repo.orders) == 1
        assert catalog.products["prod-1"].stock_quantity == 0

    @pytest.mark.asyncio
    async def test_online_reference_kept(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        resp = await svc.place_order(
            mock_db(), BUYER_ID, _request(payment_method="ONLINE", payment_reference="pay_123")
        )
        assert repo.orders[resp.order_id].payment_reference == "pay_123"
        assert repo.orders[resp.order_id].is_paid


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_owner_ships_order(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.orders["ord_1"] = make_order(status="processing")
        db = mock_db()
        resp = await svc.update_order_status(
            db, "ord_1", OWNER_ID,
            StatusTransition(new_status="shipped", patch={"tracking_id": "TRK9"}),
        )
        assert resp.status == "shipped"
        assert resp.tracking_id == "TRK9"
        assert len(resp.status_history) == 2
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_buyer_cannot_update(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.orders["ord_1"] = make_order()
        db = mock_db()
        with pytest.raises(UnauthorizedError):
            await svc.update_order_status(
                db, "ord_1", BUYER_ID, StatusTransition(new_status="processing")
            )
        assert repo.orders["ord_1"].status == "placed"
        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejected_transition_changes_nothing(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.orders["ord_1"] = make_order(status="delivered")
        db = mock_db()
        with pytest.raises(InvalidTransitionError):
            await svc.update_order_status(
                db, "ord_1", OWNER_ID, StatusTransition(new_status="cancelled")
            )
        order = repo.orders["ord_1"]
        assert order.status == "delivered"
        assert len(order.status_history) == 1
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_order(self, svc: OrderApplicationService) -> None:
        with pytest.raises(OrderNotFoundError):
            await svc.update_order_status(
                mock_db(), "missing", OWNER_ID, StatusTransition(new_status="processing")
            )

    @pytest.mark.asyncio
    async def test_price_unchanged_through_lifecycle(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.orders["ord_1"] = make_order()
        for status in ("processing", "shipped", "delivered", "refunded"):
            await svc.update_order_status(
                mock_db(), "ord_1", OWNER_ID, StatusTransition(new_status=status)
            )
        order = repo.orders["ord_1"]
        assert order.final_total == Decimal("1835.00")
        assert [e.status for e in order.status_history] == [
            "placed", "processing", "shipped", "delivered", "refunded",
        ]


class TestReads:
    @pytest.mark.asyncio
    async def test_buyer_sees_detail(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.orders["ord_1"] = make_order()
        resp = await svc.get_order_detail(mock_db(), "ord_1", BUYER_ID)
        assert resp.product_name == "Masala Chai 250g"
        assert resp.store_name == "Chai Corner"
        assert resp.customer_name == "Ravi"

    @pytest.mark.asyncio
    async def test_owner_sees_detail(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.orders["ord_1"] = make_order()
        resp = await svc.get_order_detail(mock_db(), "ord_1", OWNER_ID)
        assert resp.id == "ord_1"

    @pytest.mark.asyncio
    async def test_stranger_denied(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.orders["ord_1"] = make_order()
        with pytest.raises(UnauthorizedError):
            await svc.get_order_detail(mock_db(), "ord_1", "someone-else")

    @pytest.mark.asyncio
    async def test_missing_order(self, svc: OrderApplicationService) -> None:
        with pytest.raises(OrderNotFoundError):
            await svc.get_order_detail(mock_db(), "missing", BUYER_ID)

    @pytest.mark.asyncio
    async def test_anonymous_lists_are_empty(self, svc: OrderApplicationService) -> None:
        assert (await svc.list_orders_for_buyer(mock_db(), None)).items == []
        assert (await svc.list_orders_for_store(mock_db(), "store-1", None)).items == []

    @pytest.mark.asyncio
    async def test_buyer_list(self, svc: OrderApplicationService, repo: FakeOrderRepo) -> None:
        repo.orders["ord_1"] = make_order()
        repo.orders["ord_2"] = make_order(id="ord_2", buyer_id="other")
        resp = await svc.list_orders_for_buyer(mock_db(), BUYER_ID)
        assert [o.id for o in resp.items] == ["ord_1"]

    @pytest.mark.asyncio
    async def test_store_list_requires_owner(
        self, svc: OrderApplicationService, repo: FakeOrderRepo
    ) -> None:
        repo.orders["ord_1"] = make_order()
        resp = await svc.list_orders_for_store(mock_db(), "store-1", OWNER_ID)
        assert len(resp.items) == 1
        with pytest.raises(UnauthorizedError):
            await svc.list_orders_for_store(mock_db(), "store-1", BUYER_ID)

    @pytest.mark.asyncio
    async def test_store_list_unknown_store(self, svc: OrderApplicationService) -> None:
        with pytest.raises(StoreNotFoundError):
            await svc.list_orders_for_store(mock_db(), "nope", OWNER_ID)
