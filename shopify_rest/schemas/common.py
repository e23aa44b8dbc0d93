from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict


class ShopifyModel(BaseModel):
    """
    Базовая модель для ресурсов Shopify REST API.

    Все поля необязательные. На запись уходят только явно заданные поля
    (exclude_unset), поэтому "не задано" и "null" различаются.
    """

    model_config = ConfigDict(extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ListOptions(BaseModel):
    """Query-параметры для list/count. Пустые поля в запрос не попадают."""

    model_config = ConfigDict(extra="forbid")

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# --- Вложенные объекты ---
class NoteAttribute(ShopifyModel):
    name: str | None = None
    value: Any = None


class TaxLine(ShopifyModel):
    title: str | None = None
    price: Decimal | None = None
    rate: Decimal | None = None


class Address(ShopifyModel):
    id: int | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    company: str | None = None
    country: str | None = None
    country_code: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    name: str | None = None
    phone: str | None = None
    province: str | None = None
    province_code: str | None = None
    zip: str | None = None


class Customer(ShopifyModel):
    id: int | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    state: str | None = None
    note: str | None = None
    verified_email: bool | None = None
    multipass_identifier: str | None = None
    orders_count: int | None = None
    tax_exempt: bool | None = None
    total_spent: Decimal | None = None
    phone: str | None = None
    tags: str | None = None
    last_order_id: int | None = None
    last_order_name: str | None = None
    accepts_marketing: bool | None = None
    default_address: Address | None = None
    addresses: list[Address] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
