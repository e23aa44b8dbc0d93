from __future__ import annotations

from typing import Any

from .base_client import ShopifyApiClient, require_id
from shopify_rest.schemas.fulfillment import Fulfillment, FulfillmentResource, FulfillmentsResource


class FulfillmentService:
    """Fulfillments of a single owning resource, e.g. draft_orders/42/fulfillments."""

    def __init__(self, client: ShopifyApiClient, resource: str, resource_id: int):
        self.client = client
        self.resource = resource
        self.resource_id = resource_id

    def _prefix(self) -> str:
        return f"{self.resource}/{require_id(self.resource_id, self.resource)}/fulfillments"

    def _item_path(self, fulfillment_id: int | None, action: str | None = None) -> str:
        path = f"{self._prefix()}/{require_id(fulfillment_id, 'fulfillment')}"
        if action:
            path = f"{path}/{action}"
        return f"{path}.json"

    def list(self, options: Any = None) -> list[Fulfillment]:
        resource = self.client.get(f"{self._prefix()}.json", FulfillmentsResource, options)
        return resource.fulfillments

    def count(self, options: Any = None) -> int:
        return self.client.count(f"{self._prefix()}/count.json", options)

    def get(self, fulfillment_id: int, options: Any = None) -> Fulfillment | None:
        return self.client.get(self._item_path(fulfillment_id), FulfillmentResource, options).fulfillment

    def create(self, fulfillment: Fulfillment) -> Fulfillment | None:
        body = FulfillmentResource(fulfillment=fulfillment)
        return self.client.post(f"{self._prefix()}.json", body, FulfillmentResource).fulfillment

    def update(self, fulfillment: Fulfillment) -> Fulfillment | None:
        body = FulfillmentResource(fulfillment=fulfillment)
        return self.client.put(self._item_path(fulfillment.id), body, FulfillmentResource).fulfillment

    # Смена статуса: POST с пустым телом на complete/open/cancel
    def complete(self, fulfillment_id: int) -> Fulfillment | None:
        return self.client.post(self._item_path(fulfillment_id, "complete"), {}, FulfillmentResource).fulfillment

    def transition(self, fulfillment_id: int) -> Fulfillment | None:
        return self.client.post(self._item_path(fulfillment_id, "open"), {}, FulfillmentResource).fulfillment

    def cancel(self, fulfillment_id: int) -> Fulfillment | None:
        return self.client.post(self._item_path(fulfillment_id, "cancel"), {}, FulfillmentResource).fulfillment
