from __future__ import annotations

import logging
from typing import Any

from .base_client import ShopifyApiClient, require_id
from .fulfillments import FulfillmentService
from .metafields import MetafieldService
from shopify_rest.core.observability import log_step
from shopify_rest.schemas.draft_order import DraftOrder, DraftOrderResource, DraftOrdersResource
from shopify_rest.schemas.fulfillment import Fulfillment
from shopify_rest.schemas.metafield import Metafield

DRAFT_ORDERS_BASE_PATH = "draft_orders"
DRAFT_ORDERS_RESOURCE_NAME = "draft_orders"

logger = logging.getLogger(__name__)


class DraftOrderService:
    """
    Черновики заказов Shopify: list/count/get/create/update,
    плюс metafields и fulfillments конкретного черновика.
    See: https://shopify.dev/docs/api/admin-rest/latest/resources/draftorder
    """

    def __init__(self, client: ShopifyApiClient):
        self.client = client

    def _path(self, draft_order_id: int | None) -> str:
        return f"{DRAFT_ORDERS_BASE_PATH}/{require_id(draft_order_id, 'draft order')}.json"

    @log_step("draft_orders.list")
    def list(self, options: Any = None) -> list[DraftOrder]:
        resource = self.client.get(f"{DRAFT_ORDERS_BASE_PATH}.json", DraftOrdersResource, options)
        return resource.draft_orders

    @log_step("draft_orders.count")
    def count(self, options: Any = None) -> int:
        return self.client.count(f"{DRAFT_ORDERS_BASE_PATH}/count.json", options)

    @log_step("draft_orders.get")
    def get(self, draft_order_id: int, options: Any = None) -> DraftOrder | None:
        path = self._path(draft_order_id)
        logger.debug("Fetching draft order", extra={"extra": {"path": path}})
        return self.client.get(path, DraftOrderResource, options).draft_order

    @log_step("draft_orders.create")
    def create(self, draft_order: DraftOrder) -> DraftOrder | None:
        # id из тела Shopify игнорирует и присваивает свой
        body = DraftOrderResource(draft_order=draft_order)
        return self.client.post(f"{DRAFT_ORDERS_BASE_PATH}.json", body, DraftOrderResource).draft_order

    @log_step("draft_orders.update")
    def update(self, draft_order: DraftOrder) -> DraftOrder | None:
        path = self._path(draft_order.id)
        body = DraftOrderResource(draft_order=draft_order)
        return self.client.put(path, body, DraftOrderResource).draft_order

    # --- Metafields ---
    def _metafields(self, draft_order_id: int) -> MetafieldService:
        return MetafieldService(self.client, resource=DRAFT_ORDERS_RESOURCE_NAME, resource_id=draft_order_id)

    @log_step("draft_orders.list_metafields")
    def list_metafields(self, draft_order_id: int, options: Any = None) -> list[Metafield]:
        return self._metafields(draft_order_id).list(options)

    @log_step("draft_orders.count_metafields")
    def count_metafields(self, draft_order_id: int, options: Any = None) -> int:
        return self._metafields(draft_order_id).count(options)

    @log_step("draft_orders.get_metafield")
    def get_metafield(self, draft_order_id: int, metafield_id: int, options: Any = None) -> Metafield | None:
        return self._metafields(draft_order_id).get(metafield_id, options)

    @log_step("draft_orders.create_metafield")
    def create_metafield(self, draft_order_id: int, metafield: Metafield) -> Metafield | None:
        return self._metafields(draft_order_id).create(metafield)

    @log_step("draft_orders.update_metafield")
    def update_metafield(self, draft_order_id: int, metafield: Metafield) -> Metafield | None:
        return self._metafields(draft_order_id).update(metafield)

    @log_step("draft_orders.delete_metafield")
    def delete_metafield(self, draft_order_id: int, metafield_id: int) -> None:
        self._metafields(draft_order_id).delete(metafield_id)

    # --- Fulfillments ---
    def _fulfillments(self, draft_order_id: int) -> FulfillmentService:
        return FulfillmentService(self.client, resource=DRAFT_ORDERS_RESOURCE_NAME, resource_id=draft_order_id)

    @log_step("draft_orders.list_fulfillments")
    def list_fulfillments(self, draft_order_id: int, options: Any = None) -> list[Fulfillment]:
        return self._fulfillments(draft_order_id).list(options)

    @log_step("draft_orders.count_fulfillments")
    def count_fulfillments(self, draft_order_id: int, options: Any = None) -> int:
        return self._fulfillments(draft_order_id).count(options)

    @log_step("draft_orders.get_fulfillment")
    def get_fulfillment(self, draft_order_id: int, fulfillment_id: int, options: Any = None) -> Fulfillment | None:
        return self._fulfillments(draft_order_id).get(fulfillment_id, options)

    @log_step("draft_orders.create_fulfillment")
    def create_fulfillment(self, draft_order_id: int, fulfillment: Fulfillment) -> Fulfillment | None:
        return self._fulfillments(draft_order_id).create(fulfillment)

    @log_step("draft_orders.update_fulfillment")
    def update_fulfillment(self, draft_order_id: int, fulfillment: Fulfillment) -> Fulfillment | None:
        return self._fulfillments(draft_order_id).update(fulfillment)

    @log_step("draft_orders.complete_fulfillment")
    def complete_fulfillment(self, draft_order_id: int, fulfillment_id: int) -> Fulfillment | None:
        return self._fulfillments(draft_order_id).complete(fulfillment_id)

    @log_step("draft_orders.transition_fulfillment")
    def transition_fulfillment(self, draft_order_id: int, fulfillment_id: int) -> Fulfillment | None:
        return self._fulfillments(draft_order_id).transition(fulfillment_id)

    @log_step("draft_orders.cancel_fulfillment")
    def cancel_fulfillment(self, draft_order_id: int, fulfillment_id: int) -> Fulfillment | None:
        return self._fulfillments(draft_order_id).cancel(fulfillment_id)
