from conftest import DROPSHIP_WAREHOUSE, line_item_payload, order_payload, supplier_metafields
from jarvis.internal.dropship.resolver import FulfillmentResolver
from jarvis.internal.integrations.shopify import ShopifyException
from jarvis.models.pydantic.shopify.admin import FulfillmentOrdersResponse, LocationResponse, MetafieldsResponse
from jarvis.models.pydantic.shopify.order import Order


class TestWarehouse:
    async def test_assigned_location_name(self, rest_client, order):
        warehouse = await FulfillmentResolver(rest_client).get_warehouse(order, order.line_items[0])
        assert warehouse == DROPSHIP_WAREHOUSE
        rest_client.get_fulfillment_orders.assert_awaited_once_with(order.id)
        rest_client.get_location.assert_not_awaited()

    async def test_location_lookup_by_id(self, rest_client, order):
        rest_client.get_fulfillment_orders.return_value = FulfillmentOrdersResponse(
            fulfillment_orders=[{'id': 1, 'assigned_location_id': 70000000001}]
        )
        rest_client.get_location.return_value = LocationResponse(location={'id': 70000000001, 'name': 'Main Store'})
        warehouse = await FulfillmentResolver(rest_client).get_warehouse(order, order.line_items[0])
        assert warehouse == 'Main Store'
        rest_client.get_location.assert_awaited_once_with(70000000001)

    async def test_picks_fulfillment_order_of_the_line_item(self, rest_client):
        order = Order(**order_payload(line_items=[line_item_payload(id=1), line_item_payload(id=2)]))
        rest_client.get_fulfillment_orders.return_value = FulfillmentOrdersResponse(
            fulfillment_orders=[
                {'id': 1, 'assigned_location': {'name': 'Main Store'}, 'line_items': [{'line_item_id': 1}]},
                {'id': 2, 'assigned_location': {'name': DROPSHIP_WAREHOUSE}, 'line_items': [{'line_item_id': 2}]},
            ]
        )
        resolver = FulfillmentResolver(rest_client)
        assert await resolver.get_warehouse(order, order.line_items[0]) == 'Main Store'
        assert await resolver.get_warehouse(order, order.line_items[1]) == DROPSHIP_WAREHOUSE

    async def test_vendor_fulfilled(self, rest_client):
        order = Order(**order_payload(line_items=[line_item_payload(vendor='Acme')]))
        rest_client.get_fulfillment_orders.return_value = FulfillmentOrdersResponse()
        assert await FulfillmentResolver(rest_client).get_warehouse(order, order.line_items[0]) == 'Acme (Vendor Fulfilled)'

    async def test_shipping_line_title(self, rest_client, order):
        rest_client.get_fulfillment_orders.return_value = FulfillmentOrdersResponse()
        assert await FulfillmentResolver(rest_client).get_warehouse(order, order.line_items[0]) == 'Standard Shipping'

    async def test_unknown_warehouse(self, rest_client):
        order = Order(**order_payload(shipping_lines=[]))
        rest_client.get_fulfillment_orders.return_value = FulfillmentOrdersResponse()
        assert await FulfillmentResolver(rest_client).get_warehouse(order, order.line_items[0]) == 'Unknown Warehouse'

    async def test_lookup_failure_degrades(self, rest_client):
        order = Order(**order_payload(line_items=[line_item_payload(vendor='Acme')]))
        rest_client.get_fulfillment_orders.side_effect = ShopifyException(msg='HTTP 401')
        assert await FulfillmentResolver(rest_client).get_warehouse(order, order.line_items[0]) == 'Unknown Warehouse'

    async def test_location_lookup_failure_degrades(self, rest_client, order):
        rest_client.get_fulfillment_orders.return_value = FulfillmentOrdersResponse(
            fulfillment_orders=[{'id': 1, 'assigned_location_id': 7}]
        )
        rest_client.get_location.side_effect = ShopifyException(msg='HTTP 404')
        assert await FulfillmentResolver(rest_client).get_warehouse(order, order.line_items[0]) == 'Unknown Warehouse'


class TestSupplier:
    async def test_supplier_metafield(self, rest_client, order):
        rest_client.get_product_metafields.return_value = supplier_metafields(' Medline Canada ')
        assert await FulfillmentResolver(rest_client).get_supplier(order.line_items[0]) == 'Medline Canada'
        rest_client.get_product_metafields.assert_awaited_once_with(8000000001)

    async def test_vendor_fallback(self, rest_client):
        order = Order(**order_payload(line_items=[line_item_payload(vendor='Best Buy')]))
        rest_client.get_product_metafields.return_value = MetafieldsResponse()
        assert await FulfillmentResolver(rest_client).get_supplier(order.line_items[0]) == 'Best Buy'

    async def test_blank_metafield_falls_back(self, rest_client, order):
        rest_client.get_product_metafields.return_value = supplier_metafields('  ')
        assert await FulfillmentResolver(rest_client).get_supplier(order.line_items[0]) == 'No Supplier Found'

    async def test_lookup_failure_degrades(self, rest_client, order):
        rest_client.get_product_metafields.side_effect = ShopifyException(msg='ConnectError')
        assert await FulfillmentResolver(rest_client).get_supplier(order.line_items[0]) == 'Unknown Supplier'

    async def test_custom_item_without_product(self, rest_client):
        order = Order(**order_payload(line_items=[line_item_payload(product_id=None, vendor='Best Buy')]))
        assert await FulfillmentResolver(rest_client).get_supplier(order.line_items[0]) == 'Best Buy'
        rest_client.get_product_metafields.assert_not_awaited()


async def test_resolve(rest_client, order):
    item = await FulfillmentResolver(rest_client).resolve(order, order.line_items[0])
    assert item.warehouse == DROPSHIP_WAREHOUSE
    assert item.supplier == 'Best Buy'
    assert item.line_item.sku == 'BB-6501234'