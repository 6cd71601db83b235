# src/mk_order/infrastructure/persistence.py
"""OrderRepository: raw SQL persistence implementation.

status_history lives in order_status_history, keyed by (order_id, seq).
Rows are only ever inserted; the unique key rejects a second writer that
raced past the order row lock with a stale history length.
"""
import json
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_order.domain.models import Order, OrderView, ShippingAddress, StatusHistoryEntry

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, buyer_id, store_id, product_id,
        quantity, unit_price_at_order, shipping_address,
        payment_method, payment_reference,
        subtotal, store_charges, gst_amount, cod_charges, final_total,
        status, created_at, updated_at)
    VALUES (:id, :buyer_id, :store_id, :product_id,
        :quantity, :unit_price_at_order, CAST(:shipping_address AS JSONB),
        :payment_method, :payment_reference,
        :subtotal, :store_charges, :gst_amount, :cod_charges, :final_total,
        :status, :created_at, :created_at)
""")

_INSERT_HISTORY_SQL = text("""
    INSERT INTO order_status_history
        (order_id, seq, status, timestamp_ms, location, description)
    VALUES (:order_id, :seq, :status, :timestamp_ms, :location, :description)
""")

_UPDATE_LIFECYCLE_SQL = text("""
    UPDATE orders
    SET status = :status,
        tracking_id = :tracking_id,
        courier_name = :courier_name,
        estimated_delivery_time = :estimated_delivery_time,
        cancellation_reason = :cancellation_reason,
        updated_at = NOW()
    WHERE id = :id
""")

_SELECT_COLUMNS = """
    o.id, o.buyer_id, o.store_id, o.product_id,
    o.quantity, o.unit_price_at_order, o.shipping_address,
    o.payment_method, o.payment_reference,
    o.subtotal, o.store_charges, o.gst_amount, o.cod_charges, o.final_total,
    o.status, o.tracking_id, o.courier_name, o.estimated_delivery_time,
    o.cancellation_reason, o.created_at, o.updated_at
"""

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders o WHERE o.id = :id
""")

_GET_ORDER_FOR_UPDATE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders o WHERE o.id = :id
    FOR UPDATE
""")

_LIST_FOR_BUYER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS},
        COALESCE(p.product_name, 'Unknown Product') AS product_name,
        COALESCE(s.store_name, 'Unknown Store') AS store_name
    FROM orders o
    LEFT JOIN products p ON p.id = o.product_id
    LEFT JOIN stores s ON s.id = o.store_id
    WHERE o.buyer_id = :buyer_id
    ORDER BY o.created_at DESC, o.id DESC
""")

_LIST_FOR_STORE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS},
        COALESCE(p.product_name, 'Unknown Product') AS product_name,
        COALESCE(u.name, 'Unknown Customer') AS customer_name,
        COALESCE(u.email, '') AS customer_email
    FROM orders o
    LEFT JOIN products p ON p.id = o.product_id
    LEFT JOIN users u ON u.id = o.buyer_id
    WHERE o.store_id = :store_id
    ORDER BY o.created_at DESC, o.id DESC
""")

_LIST_HISTORY_SQL = text("""
    SELECT order_id, seq, status, timestamp_ms, location, description
    FROM order_status_history
    WHERE order_id = ANY(string_to_array(CAST(:ids_csv AS TEXT), ','))
    ORDER BY order_id, seq
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _load_json(value: Any) -> dict[str, Any]:
    # raw text() queries hand JSONB back as a string under asyncpg
    if isinstance(value, str):
        return dict(json.loads(value))
    return dict(value)


def _address_to_json(address: ShippingAddress) -> str:
    return json.dumps(
        {
            "type": address.type,
            "street": address.street,
            "area": address.area,
            "pincode": address.pincode,
            "city": address.city,
            "state": address.state,
            "country": address.country,
            "landmark": address.landmark,
        }
    )


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object (history not loaded)."""
    address = _load_json(row.shipping_address)
    return Order(
        id=row.id,
        buyer_id=row.buyer_id,
        store_id=row.store_id,
        product_id=row.product_id,
        quantity=row.quantity,
        unit_price_at_order=row.unit_price_at_order,
        shipping_address=ShippingAddress(
            type=address["type"],
            street=address["street"],
            area=address["area"],
            pincode=address["pincode"],
            city=address["city"],
            state=address["state"],
            country=address["country"],
            landmark=address.get("landmark"),
        ),
        payment_method=row.payment_method,
        payment_reference=row.payment_reference,
        subtotal=row.subtotal,
        store_charges=row.store_charges,
        gst_amount=row.gst_amount,
        cod_charges=row.cod_charges,
        final_total=row.final_total,
        status=row.status,
        tracking_id=row.tracking_id,
        courier_name=row.courier_name,
        estimated_delivery_time=row.estimated_delivery_time,
        cancellation_reason=row.cancellation_reason,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_entry(row: Any) -> StatusHistoryEntry:
    return StatusHistoryEntry(
        status=row.status,
        timestamp=row.timestamp_ms,
        location=row.location,
        description=row.description,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, order: Order, db: AsyncSession) -> None:
        await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "buyer_id": order.buyer_id,
                "store_id": order.store_id,
                "product_id": order.product_id,
                "quantity": order.quantity,
                "unit_price_at_order": order.unit_price_at_order,
                "shipping_address": _address_to_json(order.shipping_address),
                "payment_method": order.payment_method,
                "payment_reference": order.payment_reference,
                "subtotal": order.subtotal,
                "store_charges": order.store_charges,
                "gst_amount": order.gst_amount,
                "cod_charges": order.cod_charges,
                "final_total": order.final_total,
                "status": order.status,
                "created_at": order.created_at,
            },
        )
        for seq, entry in enumerate(order.status_history):
            await self._insert_history(order.id, seq, entry, db)

    async def get_by_id(self, order_id: str, db: AsyncSession) -> Order | None:
        return await self._fetch_one(_GET_ORDER_BY_ID_SQL, order_id, db)

    async def get_by_id_for_update(self, order_id: str, db: AsyncSession) -> Order | None:
        return await self._fetch_one(_GET_ORDER_FOR_UPDATE_SQL, order_id, db)

    async def update_lifecycle(
        self, order: Order, entry: StatusHistoryEntry, db: AsyncSession
    ) -> None:
        await db.execute(
            _UPDATE_LIFECYCLE_SQL,
            {
                "id": order.id,
                "status": order.status,
                "tracking_id": order.tracking_id,
                "courier_name": order.courier_name,
                "estimated_delivery_time": order.estimated_delivery_time,
                "cancellation_reason": order.cancellation_reason,
            },
        )
        await self._insert_history(order.id, len(order.status_history) - 1, entry, db)

    async def list_for_buyer(self, buyer_id: str, db: AsyncSession) -> list[OrderView]:
        result = await db.execute(_LIST_FOR_BUYER_SQL, {"buyer_id": buyer_id})
        rows = result.fetchall()
        views = [
            OrderView(
                order=_row_to_order(row),
                product_name=row.product_name,
                store_name=row.store_name,
            )
            for row in rows
        ]
        await self._attach_history([v.order for v in views], db)
        return views

    async def list_for_store(self, store_id: str, db: AsyncSession) -> list[OrderView]:
        result = await db.execute(_LIST_FOR_STORE_SQL, {"store_id": store_id})
        rows = result.fetchall()
        views = [
            OrderView(
                order=_row_to_order(row),
                product_name=row.product_name,
                customer_name=row.customer_name,
                customer_email=row.customer_email,
            )
            for row in rows
        ]
        await self._attach_history([v.order for v in views], db)
        return views

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_one(self, stmt: Any, order_id: str, db: AsyncSession) -> Order | None:
        result = await db.execute(stmt, {"id": order_id})
        row = result.fetchone()
        if row is None:
            return None
        order = _row_to_order(row)
        await self._attach_history([order], db)
        return order

    async def _attach_history(self, orders: list[Order], db: AsyncSession) -> None:
        if not orders:
            return
        by_id = {o.id: o for o in orders}
        result = await db.execute(_LIST_HISTORY_SQL, {"ids_csv": ",".join(by_id)})
        for row in result.fetchall():
            by_id[row.order_id].status_history.append(_row_to_entry(row))

    async def _insert_history(
        self, order_id: str, seq: int, entry: StatusHistoryEntry, db: AsyncSession
    ) -> None:
        await db.execute(
            _INSERT_HISTORY_SQL,
            {
                "order_id": order_id,
                "seq": seq,
                "status": entry.status,
                "timestamp_ms": entry.timestamp,
                "location": entry.location,
                "description": entry.description,
            },
        )
