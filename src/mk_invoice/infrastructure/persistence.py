# src/mk_invoice/infrastructure/persistence.py
"""InvoiceRepository: raw SQL persistence implementation.

Sequence allocation is a single upsert on invoice_sequences, so two
concurrent generations on the same day always receive distinct numbers.
Snapshots are stored as JSONB; money inside JSON is kept as strings.
"""
import json
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_catalog.domain.models import BusinessAddress
from src.mk_invoice.domain.models import (
    CustomerSnapshot,
    Invoice,
    InvoiceLineItem,
    StoreSnapshot,
)
from src.mk_order.domain.models import ShippingAddress

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_NEXT_SEQUENCE_SQL = text("""
    INSERT INTO invoice_sequences (day, last_value)
    VALUES (:day, 1)
    ON CONFLICT (day) DO UPDATE
        SET last_value = invoice_sequences.last_value + 1
    RETURNING last_value
""")

_INSERT_INVOICE_SQL = text("""
    INSERT INTO invoices (id, order_id, buyer_id, store_id, invoice_number, issue_date,
        store_details, customer_details, items,
        subtotal, store_charges, gst_amount, cod_charges, total_amount,
        payment_method, payment_reference)
    VALUES (:id, :order_id, :buyer_id, :store_id, :invoice_number, :issue_date,
        CAST(:store_details AS JSONB), CAST(:customer_details AS JSONB), CAST(:items AS JSONB),
        :subtotal, :store_charges, :gst_amount, :cod_charges, :total_amount,
        :payment_method, :payment_reference)
    ON CONFLICT (order_id) DO NOTHING
    RETURNING id
""")

_SELECT_COLUMNS = """
    id, order_id, buyer_id, store_id, invoice_number, issue_date,
    store_details, customer_details, items,
    subtotal, store_charges, gst_amount, cod_charges, total_amount,
    payment_method, payment_reference
"""

_GET_BY_ID_SQL = text(f"SELECT {_SELECT_COLUMNS} FROM invoices WHERE id = :id")

_GET_BY_ORDER_ID_SQL = text(f"SELECT {_SELECT_COLUMNS} FROM invoices WHERE order_id = :order_id")

_LIST_BY_BUYER_SQL = text(f"""
    SELECT {_SELECT_COLUMNS} FROM invoices
    WHERE buyer_id = :buyer_id
    ORDER BY issue_date DESC, id DESC
""")

_LIST_BY_STORE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS} FROM invoices
    WHERE store_id = :store_id
    ORDER BY issue_date DESC, id DESC
""")


# ---------------------------------------------------------------------------
# Snapshot (de)serialization
# ---------------------------------------------------------------------------


def _load_json(value: Any) -> Any:
    return json.loads(value) if isinstance(value, str) else value


def _items_to_json(items: list[InvoiceLineItem]) -> str:
    return json.dumps(
        [
            {
                "product_id": i.product_id,
                "product_name": i.product_name,
                "quantity": i.quantity,
                "unit_price": str(i.unit_price),
                "total_price": str(i.total_price),
            }
            for i in items
        ]
    )


def _row_to_invoice(row: Any) -> Invoice:
    store = _load_json(row.store_details)
    customer = _load_json(row.customer_details)
    items = _load_json(row.items)
    return Invoice(
        id=row.id,
        order_id=row.order_id,
        buyer_id=row.buyer_id,
        store_id=row.store_id,
        invoice_number=row.invoice_number,
        issue_date=row.issue_date,
        store=StoreSnapshot(
            store_name=store["store_name"],
            owner_name=store["owner_name"],
            owner_email=store["owner_email"],
            owner_phone=store["owner_phone"],
            business_address=BusinessAddress(**store["business_address"]),
            gst_number=store.get("gst_number"),
            invoice_terms=store["invoice_terms"],
            signature_id=store.get("signature_id"),
        ),
        customer=CustomerSnapshot(
            name=customer.get("name"),
            email=customer.get("email"),
            phone=customer.get("phone"),
            shipping_address=ShippingAddress(**customer["shipping_address"]),
        ),
        items=[
            InvoiceLineItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=i["quantity"],
                unit_price=Decimal(i["unit_price"]),
                total_price=Decimal(i["total_price"]),
            )
            for i in items
        ],
        subtotal=row.subtotal,
        store_charges=row.store_charges,
        gst_amount=row.gst_amount,
        cod_charges=row.cod_charges,
        total_amount=row.total_amount,
        payment_method=row.payment_method,
        payment_reference=row.payment_reference,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class InvoiceRepository:
    """Concrete implementation of InvoiceRepositoryProtocol using raw SQL."""

    async def next_sequence(self, day: date, db: AsyncSession) -> int:
        result = await db.execute(_NEXT_SEQUENCE_SQL, {"day": day})
        return int(result.scalar_one())

    async def insert_if_absent(self, invoice: Invoice, db: AsyncSession) -> bool:
        result = await db.execute(
            _INSERT_INVOICE_SQL,
            {
                "id": invoice.id,
                "order_id": invoice.order_id,
                "buyer_id": invoice.buyer_id,
                "store_id": invoice.store_id,
                "invoice_number": invoice.invoice_number,
                "issue_date": invoice.issue_date,
                "store_details": json.dumps(asdict(invoice.store)),
                "customer_details": json.dumps(asdict(invoice.customer)),
                "items": _items_to_json(invoice.items),
                "subtotal": invoice.subtotal,
                "store_charges": invoice.store_charges,
                "gst_amount": invoice.gst_amount,
                "cod_charges": invoice.cod_charges,
                "total_amount": invoice.total_amount,
                "payment_method": invoice.payment_method,
                "payment_reference": invoice.payment_reference,
            },
        )
        return result.fetchone() is not None

    async def get_by_id(self, invoice_id: str, db: AsyncSession) -> Invoice | None:
        result = await db.execute(_GET_BY_ID_SQL, {"id": invoice_id})
        row = result.fetchone()
        return _row_to_invoice(row) if row else None

    async def get_by_order_id(self, order_id: str, db: AsyncSession) -> Invoice | None:
        result = await db.execute(_GET_BY_ORDER_ID_SQL, {"order_id": order_id})
        row = result.fetchone()
        return _row_to_invoice(row) if row else None

    async def list_by_buyer(self, buyer_id: str, db: AsyncSession) -> list[Invoice]:
        result = await db.execute(_LIST_BY_BUYER_SQL, {"buyer_id": buyer_id})
        return [_row_to_invoice(row) for row in result.fetchall()]

    async def list_by_store(self, store_id: str, db: AsyncSession) -> list[Invoice]:
        result = await db.execute(_LIST_BY_STORE_SQL, {"store_id": store_id})
        return [_row_to_invoice(row) for row in result.fetchall()]
