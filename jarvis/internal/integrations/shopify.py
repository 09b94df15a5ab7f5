import re
import traceback
import httpx
from asyncio import sleep
from pydantic import BaseModel, ValidationError

if __name__ == '__main__':
    from os.path import abspath
    from sys import path as sys_path

    sys_path.append(abspath('.'))

from jarvis.config import Config
from jarvis.internal.gen.utilities import divide
from jarvis.internal.integrations.base import BaseClient, ClientException
from jarvis.internal.log import factory_logger
from jarvis.models.pydantic.shopify.admin import (
    FulfillmentOrdersResponse,
    LocationResponse,
    MetafieldsResponse,
    OrderResponse,
    RisksResponse,
)

log_shopify = factory_logger('shopify', file=True)


def admin_host(store_url: str, version: str) -> str:
    store = re.sub(r'^https?://', '', store_url).rstrip('/')
    return f'https://{store}/admin/api/{version}'


class ShopifyException(ClientException):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.payload and self.payload.get('query', False):
            self.payload['query'] = re.sub(r'\s+', ' ', self.payload['query'])


class ShopifyRestClient(BaseClient):
    """Admin REST endpoints: fulfillment orders, locations, metafields and risks."""

    def __init__(
        self,
        store_url: str = Config.store_url_shopify,
        version: str = Config.api_version_shopify,
        access_token: str = Config.api_key_shopify,
        min_interval: float = 0.5,  # REST bucket leaks 2 requests per second
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(min_interval=min_interval, transport=transport)
        self.host = admin_host(store_url, version)
        self.headers = {
            'Content-Type': 'application/json',
            'X-Shopify-Access-Token': access_token,
        }

    async def _get(self, path: str) -> dict:
        url = f'{self.host}/{path}'
        try:
            return await self.request('GET', self.headers, url)
        except ClientException as e:
            exception = ShopifyException(url=url, response=e.response, msg=e.msg or type(e).__name__)
            log_shopify.error(f'REST GET failed: {exception}')
            raise exception
        except Exception as e:
            exception = ShopifyException(url=url, msg=type(e).__name__)
            log_shopify.error(f'REST GET failed: {exception} {traceback.format_exc()}')
            raise exception

    def _parse(self, model: type[BaseModel], response: dict, url: str):
        try:
            return model(**response)
        except ValidationError as e:
            msg = f'{type(e)} {model.__name__}'
            msg += f'\n{repr(e.errors())}'
            exception = ShopifyException(url=url, response=response, msg=msg)
            log_shopify.error(str(exception))
            raise exception

    async def get_fulfillment_orders(self, order_id: int) -> FulfillmentOrdersResponse:
        path = f'orders/{order_id}/fulfillment_orders.json'
        response = await self._get(path)
        return self._parse(FulfillmentOrdersResponse, response, path)

    async def get_location(self, location_id: int) -> LocationResponse:
        path = f'locations/{location_id}.json'
        response = await self._get(path)
        return self._parse(LocationResponse, response, path)

    async def get_product_metafields(self, product_id: int) -> MetafieldsResponse:
        path = f'products/{product_id}/metafields.json'
        response = await self._get(path)
        return self._parse(MetafieldsResponse, response, path)

    async def get_order_risks(self, order_id: int) -> RisksResponse:
        path = f'orders/{order_id}/risks.json'
        response = await self._get(path)
        return self._parse(RisksResponse, response, path)


class ShopifyGraphQLClient(BaseClient):
    class Variables(BaseModel):
        id: int | str | None = None
        gid: str | None = None
        tags: list[str] | None = None

    def __init__(
        self,
        store_url: str = Config.store_url_shopify,
        version: str = Config.api_version_shopify,
        access_token: str = Config.api_key_shopify,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(min_interval=0, transport=transport)
        self.host = f'{admin_host(store_url, version)}/graphql.json'
        self.access_token = access_token
        self.headers = {
            'Content-Type': 'application/json',
            'X-Shopify-Access-Token': access_token,
        }
        self.payload = {}
        self.response = {}

    async def _execute_query(self, query: str, **variables) -> dict:
        self.payload = {'query': query, 'variables': variables or {}}
        self.response = {}

        try:
            self.response = await self.request('POST', self.headers, self.host, payload=self.payload)
        except Exception as e:
            exception = ShopifyException(url=self.host, payload=self.payload, msg=type(e).__name__)
            log_shopify.error(f'GraphQL query failed: {exception} {traceback.format_exc()}')
            raise exception

        if self.response.get('errors'):
            exception = ShopifyException(url=self.host, payload=self.payload, response=self.response, msg='GraphQL errors')
            log_shopify.error(str(exception))
            raise exception

        throttle_status = self.response.get('extensions', {}).get('cost', {}).get('throttleStatus')
        if throttle_status:
            currently_available = throttle_status['currentlyAvailable']
            diff_available = throttle_status['maximumAvailable'] - currently_available
            if currently_available < 200:
                await sleep(divide(diff_available, throttle_status['restoreRate']))
        return self.response

    def get_specific_obj_response(self, response: dict, keys: list[str]):
        """Returns the object found by walking each key of keys through the response."""
        obj = response
        if not response:
            exception = ShopifyException(payload=self.payload, response=response, msg='Empty response')
            log_shopify.error(str(exception))
            raise exception

        for key in keys:
            if isinstance(obj, dict):
                obj = obj.get(key, None)

            if obj is None:
                msg = f'Missing {key}, keys: {keys}'
                exception = ShopifyException(payload=self.payload, response=response, msg=msg)
                log_shopify.error(str(exception))
                raise exception

        return obj

    async def get_order(self, order_gid: str) -> OrderResponse:
        query = """
        query GetOrder($gid: ID!) {
            order(id: $gid) {
                id
                tags
                shippingAddress {
                    validationResultSummary
                }
            }
        }
        """
        variables = self.Variables(gid=order_gid).model_dump(exclude_none=True)
        order_json = await self._execute_query(query, **variables)
        try:
            order_response = OrderResponse(**order_json)
        except ValidationError as e:
            msg = f'{type(e)} {OrderResponse.__name__}'
            msg += f'\n{repr(e.errors())}'
            exception = ShopifyException(url=self.host, payload=self.payload, response=order_json, msg=msg)
            raise exception

        if not order_response.valid():
            msg = 'Order not found'
            exception = ShopifyException(url=self.host, payload=self.payload, response=order_json, msg=msg)
            raise exception

        return order_response

    async def taggs_add(self, id: int | str, tags: list[str]) -> bool:
        mutation = """
        mutation addTags($id: ID!, $tags: [String!]!) {
            tagsAdd(id: $id, tags: $tags) {
                node {
                   id
                }
                userErrors {
                    message
                }
            }
        }
        """
        variables = self.Variables(id=id, tags=tags).model_dump(exclude_none=True)
        mutation_json = await self._execute_query(mutation, **variables)
        user_errors = self.get_specific_obj_response(mutation_json, ['data', 'tagsAdd', 'userErrors'])
        if user_errors:
            log_shopify.error(f'tagsAdd {id}: {user_errors}')
        return isinstance(user_errors, list) and len(user_errors) == 0


if __name__ == '__main__':
    from asyncio import run

    async def main():
        rest_client = ShopifyRestClient()
        graphql_client = ShopifyGraphQLClient()

        # fulfillment_orders = await rest_client.get_fulfillment_orders(5934823587981)
        # print(fulfillment_orders.model_dump_json(indent=2))

        risks = await rest_client.get_order_risks(5934823587981)
        print(risks.max_score)

        order = await graphql_client.get_order('gid://shopify/Order/5934823587981')
        print(order.model_dump_json(indent=2))

    run(main())
