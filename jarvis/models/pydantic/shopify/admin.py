# jarvis.models.pydantic.shopify.admin

# Shopify Admin API responses consumed while enriching an order

from enum import Enum
from pydantic import field_validator
from jarvis.models.pydantic.base import Base


# region REST
class AssignedLocation(Base):
    location_id: int = 0
    name: str = ''


class FulfillmentOrderLineItem(Base):
    id: int = 0
    line_item_id: int = 0
    quantity: int = 0


class FulfillmentOrder(Base):
    id: int = 0
    order_id: int = 0
    status: str = ''
    assigned_location_id: int = 0
    assigned_location: AssignedLocation = AssignedLocation()
    line_items: list[FulfillmentOrderLineItem] = []

    def contains(self, line_item_id: int) -> bool:
        return any(item.line_item_id == line_item_id for item in self.line_items)


class FulfillmentOrdersResponse(Base):
    fulfillment_orders: list[FulfillmentOrder] = []

    def for_line_item(self, line_item_id: int) -> FulfillmentOrder | None:
        """Fulfillment order holding the line item, else the first one."""
        for fulfillment_order in self.fulfillment_orders:
            if fulfillment_order.contains(line_item_id):
                return fulfillment_order
        return self.fulfillment_orders[0] if self.fulfillment_orders else None


class Location(Base):
    id: int = 0
    name: str = ''


class LocationResponse(Base):
    location: Location = Location()


class Metafield(Base):
    id: int = 0
    namespace: str = ''
    key: str = ''
    value: str = ''

    @field_validator('value', mode='before')
    @classmethod
    def value_as_str(cls, value):
        # Number and boolean metafields arrive unquoted
        return value if isinstance(value, str) else str(value)


class MetafieldsResponse(Base):
    metafields: list[Metafield] = []

    def supplier(self) -> Metafield | None:
        """Metafield keyed supplier, else the first one in the custom namespace."""
        for metafield in self.metafields:
            if metafield.key == 'supplier':
                return metafield
        for metafield in self.metafields:
            if metafield.namespace == 'custom':
                return metafield
        return None


class Risk(Base):
    id: int = 0
    score: float = 0
    recommendation: str = ''
    source: str = ''
    message: str = ''


class RisksResponse(Base):
    risks: list[Risk] = []

    @property
    def max_score(self) -> float:
        return max((risk.score for risk in self.risks), default=0.0)


# endregion REST


# region GraphQL
class AddressValidationResult(Enum):
    """MailingAddressValidationResult returned by the GraphQL Admin API."""

    NO_ISSUES = 'NO_ISSUES'
    WARNING = 'WARNING'
    ERROR = 'ERROR'


class GraphQLShippingAddress(Base):
    validationResultSummary: AddressValidationResult | None = None


class GraphQLOrder(Base):
    id: str = ''
    tags: list[str] = []
    shippingAddress: GraphQLShippingAddress = GraphQLShippingAddress()


class OrderData(Base):
    order: GraphQLOrder = GraphQLOrder()  # order: null when the id does not exist


class OrderResponse(Base):
    data: OrderData = OrderData()

    def valid(self) -> bool:
        return self.data.order.id != ''


# endregion GraphQL
