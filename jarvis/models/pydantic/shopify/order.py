# jarvis.models.pydantic.shopify.order

# Order payloads sent by Shopify in the orders/create webhook (REST format, snake_case)

from pydantic import computed_field
from jarvis.models.pydantic.base import Base


class ShippingAddress(Base):
    first_name: str = ''
    last_name: str = ''
    address1: str = ''
    address2: str = ''
    city: str = ''
    province_code: str = ''
    zip: str = ''  # Free text entered by the customer
    country: str = ''
    phone: str = ''


class LineItem(Base):
    id: int = 0
    sku: str = ''
    title: str = ''
    variant_title: str = ''
    quantity: int = 0
    price: float = 0
    total_discount: float = 0
    product_id: int = 0
    variant_id: int = 0
    vendor: str = ''

    @computed_field
    @property
    def display_title(self) -> str:
        if self.variant_title:
            return f'{self.title} - {self.variant_title}'
        return self.title

    @computed_field
    @property
    def net_price(self) -> float:
        """Line total after line-level discounts."""
        return round(self.price * self.quantity - self.total_discount, 2)


class ShippingLine(Base):
    title: str = ''


class Order(Base):
    id: int = 0
    admin_graphql_api_id: str = ''
    name: str = ''  # Order number as shown in the Shopify admin, e.g. #1001
    order_number: int = 0
    tags: str = ''
    shipping_address: ShippingAddress = ShippingAddress()
    line_items: list[LineItem] = []
    shipping_lines: list[ShippingLine] = []

    @property
    def gid(self) -> str:
        return self.admin_graphql_api_id or f'gid://shopify/Order/{self.id}'

    @property
    def tag_list(self) -> list[str]:
        return [tag.strip() for tag in self.tags.split(',') if tag.strip()]
