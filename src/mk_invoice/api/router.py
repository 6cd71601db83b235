# src/mk_invoice/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.mk_common.database import get_db_session
from src.mk_gateway.auth.dependencies import get_current_user_id, get_optional_user_id
from src.mk_invoice.application.schemas import InvoiceListResponse, InvoiceResponse
from src.mk_invoice.application.service import InvoiceApplicationService

router = APIRouter(tags=["invoices"])


def get_invoice_service() -> InvoiceApplicationService:
    return InvoiceApplicationService()


@router.post("/orders/{order_id}/invoice", response_model=InvoiceResponse)
async def generate_invoice(
    order_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    svc: Annotated[InvoiceApplicationService, Depends(get_invoice_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> InvoiceResponse:
    return await svc.generate_invoice(db, order_id, user_id)


@router.get("/invoices", response_model=InvoiceListResponse)
async def list_my_invoices(
    user_id: Annotated[str | None, Depends(get_optional_user_id)],
    svc: Annotated[InvoiceApplicationService, Depends(get_invoice_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> InvoiceListResponse:
    return await svc.list_my_invoices(db, user_id)


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    svc: Annotated[InvoiceApplicationService, Depends(get_invoice_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> InvoiceResponse:
    return await svc.get_invoice(db, invoice_id, user_id)


@router.get("/stores/{store_id}/invoices", response_model=InvoiceListResponse)
async def list_store_invoices(
    store_id: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    svc: Annotated[InvoiceApplicationService, Depends(get_invoice_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> InvoiceListResponse:
    return await svc.list_store_invoices(db, store_id, user_id)
