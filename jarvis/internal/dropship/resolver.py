# jarvis/internal/dropship/resolver.py
from jarvis.internal.integrations.shopify import ShopifyException, ShopifyRestClient
from jarvis.internal.log import factory_logger
from jarvis.models.pydantic.dropship import ResolvedLineItem, Sentinel
from jarvis.models.pydantic.shopify.order import LineItem, Order

log_dropship = factory_logger('dropship', file=True)


class FulfillmentResolver:
    """Resolves the assigned warehouse and the supplier of each line item through the Admin REST API."""

    def __init__(self, shopify_client: ShopifyRestClient):
        self.shopify = shopify_client

    async def get_warehouse(self, order: Order, line_item: LineItem) -> str:
        try:
            fulfillment_orders = await self.shopify.get_fulfillment_orders(order.id)
            fulfillment_order = fulfillment_orders.for_line_item(line_item.id)
            if fulfillment_order:
                if fulfillment_order.assigned_location.name:
                    return fulfillment_order.assigned_location.name
                if fulfillment_order.assigned_location_id:
                    location = await self.shopify.get_location(fulfillment_order.assigned_location_id)
                    if location.location.name:
                        return location.location.name
        except ShopifyException as e:
            log_dropship.error(f'Order {order.id} item {line_item.id}: warehouse lookup failed {e}')
            return Sentinel.UNKNOWN_WAREHOUSE.value

        if line_item.vendor:
            return f'{line_item.vendor} (Vendor Fulfilled)'
        if order.shipping_lines and order.shipping_lines[0].title:
            return order.shipping_lines[0].title
        return Sentinel.UNKNOWN_WAREHOUSE.value

    async def get_supplier(self, line_item: LineItem) -> str:
        # Custom line items have no product
        if not line_item.product_id:
            return line_item.vendor or Sentinel.NO_SUPPLIER.value
        try:
            metafields = await self.shopify.get_product_metafields(line_item.product_id)
        except ShopifyException as e:
            log_dropship.error(f'Product {line_item.product_id}: supplier lookup failed {e}')
            return Sentinel.UNKNOWN_SUPPLIER.value

        metafield = metafields.supplier()
        if metafield and metafield.value.strip():
            return metafield.value.strip()
        if line_item.vendor:
            return line_item.vendor
        return Sentinel.NO_SUPPLIER.value

    async def resolve(self, order: Order, line_item: LineItem) -> ResolvedLineItem:
        warehouse = await self.get_warehouse(order, line_item)
        supplier = await self.get_supplier(line_item)
        log_dropship.debug(f'Order {order.id} item {line_item.sku}: warehouse={warehouse} supplier={supplier}')
        return ResolvedLineItem(line_item=line_item, warehouse=warehouse, supplier=supplier)
