# jarvis.models.pydantic.dropship

from enum import Enum
from pydantic import ConfigDict
from jarvis.models.pydantic.base import Base
from jarvis.models.pydantic.shopify.order import LineItem


class Sentinel(Enum):
    UNKNOWN_WAREHOUSE = 'Unknown Warehouse'
    UNKNOWN_SUPPLIER = 'Unknown Supplier'
    NO_SUPPLIER = 'No Supplier Found'


class AddressIssue(Enum):
    NONE = 'NONE'
    WARNING = 'WARNING'
    ERROR = 'ERROR'
    UNKNOWN = 'UNKNOWN'  # Lookup failed


class Template(Enum):
    STANDARD = 'standard'
    RISK = 'risk'
    WARNING = 'warning'


class OutcomeStatus(Enum):
    NOT_QUALIFIED = 'not_qualified'
    ALREADY_ORDERED = 'already_ordered'
    RISK_REVIEW = 'risk_review'
    ADDRESS_WARNING = 'address_warning'
    SENT = 'sent'
    NOT_SENT = 'not_sent'


class ShippingDetails(Base):
    model_config = ConfigDict(frozen=True)

    name: str = ''
    address: str = ''
    contact_number: str = ''
    po_number: str = ''


class ProductDetail(Base):
    model_config = ConfigDict(frozen=True)

    sku: str = ''
    title: str = ''
    quantity: int = 0
    net_price: float = 0


class ResolvedLineItem(Base):
    line_item: LineItem = LineItem()
    warehouse: str = Sentinel.UNKNOWN_WAREHOUSE.value
    supplier: str = Sentinel.UNKNOWN_SUPPLIER.value


class QualificationResult(Base):
    qualifies: bool = False
    supplier: str = ''
    reason: str = ''
    items: list[ResolvedLineItem] = []


class OrderOutcome(Base):
    order_id: int = 0
    status: OutcomeStatus = OutcomeStatus.NOT_QUALIFIED
    supplier: str = ''
    template: Template | None = None
    tagged: bool = False
    reason: str = ''

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.SENT.value
