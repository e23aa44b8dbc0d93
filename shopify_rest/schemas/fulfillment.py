from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from .common import ListOptions, NoteAttribute, ShopifyModel, TaxLine


class Receipt(ShopifyModel):
    testcase: bool | None = None
    authorization: str | None = None


class LineItem(ShopifyModel):
    """Позиция заказа в составе отгрузки."""

    id: int | None = None
    product_id: int | None = None
    variant_id: int | None = None
    quantity: int | None = None
    price: Decimal | None = None
    total_discount: Decimal | None = None
    title: str | None = None
    variant_title: str | None = None
    name: str | None = None
    sku: str | None = None
    vendor: str | None = None
    grams: int | None = None
    fulfillment_service: str | None = None
    fulfillment_status: str | None = None
    fulfillable_quantity: int | None = None
    requires_shipping: bool | None = None
    taxable: bool | None = None
    gift_card: bool | None = None
    properties: list[NoteAttribute] | None = None
    tax_lines: list[TaxLine] | None = None


class Fulfillment(ShopifyModel):
    id: int | None = None
    order_id: int | None = None
    location_id: int | None = None
    status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    service: str | None = None
    tracking_company: str | None = None
    shipment_status: str | None = None
    tracking_number: str | None = None
    tracking_numbers: list[str] | None = None
    tracking_url: str | None = None
    tracking_urls: list[str] | None = None
    receipt: Receipt | None = None
    line_items: list[LineItem] | None = None
    notify_customer: bool | None = None


class FulfillmentResource(BaseModel):
    """Ответ эндпоинта fulfillments/X.json."""
    fulfillment: Fulfillment | None = None


class FulfillmentsResource(BaseModel):
    """Ответ эндпоинта fulfillments.json."""
    fulfillments: list[Fulfillment] = Field(default_factory=list)


class FulfillmentListOptions(ListOptions):
    limit: int | None = None
    since_id: int | None = None
    created_at_min: datetime | None = None
    created_at_max: datetime | None = None
    updated_at_min: datetime | None = None
    updated_at_max: datetime | None = None
    fields: str | None = None
