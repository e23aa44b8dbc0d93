from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from .common import Address, Customer, ListOptions, NoteAttribute, ShopifyModel, TaxLine
from .metafield import Metafield


# --- Вспомогательные модели черновика заказа ---
class AppliedDiscount(ShopifyModel):
    title: str | None = None
    description: str | None = None
    value: Decimal | None = None
    value_type: str | None = None  # "fixed_amount" | "percentage"
    amount: Decimal | None = None


class ShippingLine(ShopifyModel):
    handle: str | None = None
    price: Decimal | None = None
    title: str | None = None


class DraftOrderLineItem(ShopifyModel):
    id: int | None = None
    product_id: int | None = None
    variant_id: int | None = None
    quantity: int | None = None
    price: Decimal | None = None
    applied_discount: AppliedDiscount | None = None
    tax_lines: list[TaxLine] | None = None
    taxable: bool | None = None
    properties: list[NoteAttribute] | None = None
    gift_card: bool | None = None
    name: str | None = None
    vendor: str | None = None
    variant_title: str | None = None
    title: str | None = None
    sku: str | None = None
    requires_shipping: bool | None = None
    grams: int | None = None
    fulfillment_service: str | None = None
    fulfillable_quantity: int | None = None
    custom: bool | None = None


class DraftOrder(ShopifyModel):
    """Черновик заказа Shopify (draft order)."""

    id: int | None = None
    name: str | None = None
    email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    order_id: int | None = None
    customer: Customer | None = None
    billing_address: Address | None = None
    shipping_address: Address | None = None
    currency: str | None = None
    total_price: Decimal | None = None
    subtotal_price: Decimal | None = None
    note: str | None = None
    note_attributes: list[NoteAttribute] | None = None
    invoice_sent_at: datetime | None = None
    invoice_url: str | None = None
    line_items: list[DraftOrderLineItem] | None = None
    shipping_line: ShippingLine | None = None
    tags: str | None = None
    tax_exempt: bool | None = None
    tax_lines: list[TaxLine] | None = None
    applied_discount: AppliedDiscount | None = None
    taxes_included: bool | None = None
    total_tax: Decimal | None = None
    status: str | None = None
    metafields: list[Metafield] | None = None


class DraftOrderResource(BaseModel):
    """Ответ эндпоинта draft_orders/X.json, он же тело запроса на create/update."""
    draft_order: DraftOrder | None = None


class DraftOrdersResource(BaseModel):
    """Ответ эндпоинта draft_orders.json."""
    draft_orders: list[DraftOrder] = Field(default_factory=list)


class DraftOrderCountOptions(ListOptions):
    page: int | None = None
    limit: int | None = None
    since_id: int | None = None
    created_at_min: datetime | None = None
    created_at_max: datetime | None = None
    updated_at_min: datetime | None = None
    updated_at_max: datetime | None = None
    order: str | None = None
    fields: str | None = None
    status: str | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None


class DraftOrderListOptions(DraftOrderCountOptions):
    processed_at_min: datetime | None = None
    processed_at_max: datetime | None = None
