from __future__ import annotations

from typing import Any

from .base_client import ShopifyApiClient, require_id
from shopify_rest.schemas.metafield import Metafield, MetafieldResource, MetafieldsResource


class MetafieldService:
    """
    Metafields of a single owning resource, e.g. draft_orders/42/metafields.
    Without a resource the shop-level metafields endpoint is used.
    """

    def __init__(self, client: ShopifyApiClient, resource: str | None = None, resource_id: int | None = None):
        self.client = client
        self.resource = resource
        self.resource_id = resource_id

    def _prefix(self) -> str:
        if self.resource:
            return f"{self.resource}/{require_id(self.resource_id, self.resource)}/metafields"
        return "metafields"

    def list(self, options: Any = None) -> list[Metafield]:
        resource = self.client.get(f"{self._prefix()}.json", MetafieldsResource, options)
        return resource.metafields

    def count(self, options: Any = None) -> int:
        return self.client.count(f"{self._prefix()}/count.json", options)

    def get(self, metafield_id: int, options: Any = None) -> Metafield | None:
        path = f"{self._prefix()}/{require_id(metafield_id, 'metafield')}.json"
        return self.client.get(path, MetafieldResource, options).metafield

    def create(self, metafield: Metafield) -> Metafield | None:
        body = MetafieldResource(metafield=metafield)
        return self.client.post(f"{self._prefix()}.json", body, MetafieldResource).metafield

    def update(self, metafield: Metafield) -> Metafield | None:
        path = f"{self._prefix()}/{require_id(metafield.id, 'metafield')}.json"
        body = MetafieldResource(metafield=metafield)
        return self.client.put(path, body, MetafieldResource).metafield

    def delete(self, metafield_id: int) -> None:
        self.client.delete(f"{self._prefix()}/{require_id(metafield_id, 'metafield')}.json")
