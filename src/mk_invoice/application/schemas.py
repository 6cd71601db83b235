# src/mk_invoice/application/schemas.py
from decimal import Decimal

from pydantic import BaseModel

from src.mk_common.datetime_utils import to_epoch_ms
from src.mk_invoice.domain.models import Invoice


class AddressOut(BaseModel):
    street: str
    area: str
    pincode: str
    state: str
    country: str
    city: str | None = None
    type: str | None = None
    landmark: str | None = None


class InvoiceStoreOut(BaseModel):
    store_name: str
    owner_name: str
    owner_email: str
    owner_phone: str
    business_address: AddressOut
    gst_number: str | None = None
    invoice_terms: str
    signature_url: str | None = None


class InvoiceCustomerOut(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    shipping_address: AddressOut


class InvoiceItemOut(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class InvoiceResponse(BaseModel):
    id: str
    order_id: str
    invoice_number: str
    issue_date: int  # epoch ms
    store: InvoiceStoreOut
    customer: InvoiceCustomerOut
    items: list[InvoiceItemOut]
    subtotal: Decimal
    store_charges: Decimal
    gst_amount: Decimal
    cod_charges: Decimal
    total_amount: Decimal
    payment_method: str
    payment_status: str  # Paid / Pending, derived from payment_reference

    @classmethod
    def from_domain(cls, inv: Invoice, signature_url: str | None = None) -> "InvoiceResponse":
        ba = inv.store.business_address
        sa = inv.customer.shipping_address
        return cls(
            id=inv.id,
            order_id=inv.order_id,
            invoice_number=inv.invoice_number,
            issue_date=to_epoch_ms(inv.issue_date),
            store=InvoiceStoreOut(
                store_name=inv.store.store_name,
                owner_name=inv.store.owner_name,
                owner_email=inv.store.owner_email,
                owner_phone=inv.store.owner_phone,
                business_address=AddressOut(
                    street=ba.street, area=ba.area, pincode=ba.pincode,
                    state=ba.state, country=ba.country, landmark=ba.landmark,
                ),
                gst_number=inv.store.gst_number,
                invoice_terms=inv.store.invoice_terms,
                signature_url=signature_url,
            ),
            customer=InvoiceCustomerOut(
                name=inv.customer.name,
                email=inv.customer.email,
                phone=inv.customer.phone,
                shipping_address=AddressOut(
                    type=sa.type, street=sa.street, area=sa.area, pincode=sa.pincode,
                    city=sa.city, state=sa.state, country=sa.country, landmark=sa.landmark,
                ),
            ),
            items=[
                InvoiceItemOut(
                    product_id=i.product_id,
                    product_name=i.product_name,
                    quantity=i.quantity,
                    unit_price=i.unit_price,
                    total_price=i.total_price,
                )
                for i in inv.items
            ],
            subtotal=inv.subtotal,
            store_charges=inv.store_charges,
            gst_amount=inv.gst_amount,
            cod_charges=inv.cod_charges,
            total_amount=inv.total_amount,
            payment_method=inv.payment_method,
            payment_status=inv.payment_status.value,
        )


class InvoiceListResponse(BaseModel):
    items: list[InvoiceResponse]
