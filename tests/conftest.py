"""Shared fixtures: environment and Shopify order payloads."""

import base64
import hashlib
import hmac
import json
import os
import tempfile
from unittest.mock import AsyncMock

# Environment BEFORE any jarvis import, Config reads it once
os.environ.setdefault('ENVIRONMENT', 'development')
os.environ.setdefault('LOGS_DIR', tempfile.mkdtemp(prefix='jarvis-logs-'))
os.environ['SHOPIFY_WEBHOOK_SECRET'] = 'test-secret'
os.environ['SHOPIFY_STORE_URL'] = 'test-store.myshopify.com'
os.environ['SHOPIFY_ADMIN_API_KEY'] = 'shpat_test'
os.environ['EMAIL'] = 'orders@example.com'
os.environ['PASSWORD'] = 'app-password'
os.environ['MAIL_RECIPIENTS'] = 'purchasing@example.com'
os.environ['MAIL_RISK_RECIPIENTS'] = 'risk@example.com'
os.environ['RULESET_VERSION'] = ''

import pytest

from jarvis.internal.integrations.mail import MailClient
from jarvis.internal.integrations.shopify import ShopifyGraphQLClient, ShopifyRestClient
from jarvis.models.pydantic.shopify.admin import (
    FulfillmentOrdersResponse,
    MetafieldsResponse,
    OrderResponse,
    RisksResponse,
)
from jarvis.models.pydantic.shopify.order import Order

SECRET = 'test-secret'
DROPSHIP_WAREHOUSE = 'A - Dropship (Abbey Lane)'


def sign(body: bytes, secret: str = SECRET) -> str:
    digest = hmac.new(secret.encode(), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def line_item_payload(**overrides) -> dict:
    item = {
        'id': 13000000001,
        'sku': 'BB-6501234',
        'title': 'Insignia 32" TV',
        'variant_title': 'Black',
        'quantity': 1,
        'price': '199.99',
        'total_discount': '0.00',
        'product_id': 8000000001,
        'variant_id': 45000000001,
        'vendor': None,
    }
    item.update(overrides)
    return item


def order_payload(**overrides) -> dict:
    order = {
        'id': 5934823587981,
        'admin_graphql_api_id': 'gid://shopify/Order/5934823587981',
        'name': '#1042',
        'order_number': 1042,
        'tags': '',
        'email': 'jane@example.com',
        'shipping_address': {
            'first_name': 'Jane',
            'last_name': 'Doe',
            'address1': '120 Abbey Lane',
            'address2': 'apt 204',
            'city': 'Toronto',
            'province_code': 'ON',
            'zip': 'M5V 2T6',
            'country': 'Canada',
            'phone': '+1 416 555 0100',
            'company': None,
        },
        'line_items': [line_item_payload()],
        'shipping_lines': [{'title': 'Standard Shipping'}],
    }
    order.update(overrides)
    return order


def fulfillment_orders(location_name: str = DROPSHIP_WAREHOUSE, line_item_id: int = 13000000001):
    return FulfillmentOrdersResponse(
        fulfillment_orders=[
            {
                'id': 6100000001,
                'order_id': 5934823587981,
                'assigned_location_id': 70000000001,
                'assigned_location': {'location_id': 70000000001, 'name': location_name},
                'line_items': [{'id': 1, 'line_item_id': line_item_id, 'quantity': 1}],
            }
        ]
    )


def supplier_metafields(supplier: str = 'Best Buy') -> MetafieldsResponse:
    return MetafieldsResponse(metafields=[{'id': 1, 'namespace': 'custom', 'key': 'supplier', 'value': supplier}])


def graphql_order(tags: list[str] | None = None, validation: str | None = 'NO_ISSUES') -> OrderResponse:
    return OrderResponse(
        data={
            'order': {
                'id': 'gid://shopify/Order/5934823587981',
                'tags': tags or [],
                'shippingAddress': {'validationResultSummary': validation},
            }
        }
    )


@pytest.fixture
def order() -> Order:
    return Order(**order_payload())


@pytest.fixture
def body() -> bytes:
    return json.dumps(order_payload()).encode()


@pytest.fixture
def rest_client():
    client = AsyncMock(spec=ShopifyRestClient)
    client.get_fulfillment_orders.return_value = fulfillment_orders()
    client.get_product_metafields.return_value = supplier_metafields()
    client.get_order_risks.return_value = RisksResponse(risks=[{'score': '0.1', 'recommendation': 'accept'}])
    return client


@pytest.fixture
def graphql_client():
    client = AsyncMock(spec=ShopifyGraphQLClient)
    client.get_order.return_value = graphql_order()
    client.taggs_add.return_value = True
    return client


@pytest.fixture
def mail_client():
    client = AsyncMock(spec=MailClient)
    client.send.return_value = '<message@example.com>'
    return client
