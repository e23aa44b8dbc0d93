from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .common import ListOptions, ShopifyModel


class Metafield(ShopifyModel):
    id: int | None = None
    key: str | None = None
    value: Any = None
    value_type: str | None = None
    type: str | None = None
    namespace: str | None = None
    description: str | None = None
    owner_id: int | None = None
    owner_resource: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    admin_graphql_api_id: str | None = None


class MetafieldResource(BaseModel):
    """Ответ эндпоинта metafields/X.json."""
    metafield: Metafield | None = None


class MetafieldsResource(BaseModel):
    """Ответ эндпоинта metafields.json."""
    metafields: list[Metafield] = Field(default_factory=list)


class MetafieldListOptions(ListOptions):
    limit: int | None = None
    since_id: int | None = None
    created_at_min: datetime | None = None
    created_at_max: datetime | None = None
    updated_at_min: datetime | None = None
    updated_at_max: datetime | None = None
    namespace: str | None = None
    key: str | None = None
    type: str | None = None
    fields: str | None = None
