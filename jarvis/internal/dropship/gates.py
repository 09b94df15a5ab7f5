# jarvis/internal/dropship/gates.py
from dataclasses import dataclass

from jarvis.internal.dropship.rules import RuleSet
from jarvis.internal.integrations.shopify import ShopifyException, ShopifyRestClient
from jarvis.internal.log import factory_logger
from jarvis.models.pydantic.dropship import AddressIssue, Template
from jarvis.models.pydantic.shopify.admin import AddressValidationResult, OrderResponse
from jarvis.models.pydantic.shopify.order import Order

log_dropship = factory_logger('dropship', file=True)


@dataclass(frozen=True)
class GateDecision:
    template: Template | None = None
    reason: str = ''

    @property
    def triggered(self) -> bool:
        return self.template is not None


class RiskClassifier:
    """
    Secondary gates for orders that already qualify. Lookup failures are treated as
    triggered so an unverified order is reviewed by a person before anything is ordered.

    The address gate reads the GraphQL order the pipeline already fetched, None means that
    lookup failed.
    """

    def __init__(self, rest_client: ShopifyRestClient):
        self.rest = rest_client

    async def get_risk_score(self, order: Order) -> float | None:
        try:
            risks = await self.rest.get_order_risks(order.id)
        except ShopifyException as e:
            log_dropship.error(f'Order {order.id}: risk lookup failed {e}')
            return None
        return risks.max_score

    @staticmethod
    def get_address_issue(order_response: OrderResponse | None) -> AddressIssue:
        if order_response is None:
            return AddressIssue.UNKNOWN

        summary = order_response.data.order.shippingAddress.validationResultSummary
        if summary is None or summary == AddressValidationResult.NO_ISSUES.value:
            return AddressIssue.NONE
        return AddressIssue(summary)

    async def check_risk(self, order: Order, ruleset: RuleSet) -> GateDecision:
        score = await self.get_risk_score(order)
        if score is None:
            return GateDecision(Template.RISK, 'risk score unavailable')
        if score > ruleset.risk_threshold:
            return GateDecision(Template.RISK, f'risk score {score:.2f} above {ruleset.risk_threshold}')
        return GateDecision(reason=f'risk score {score:.2f}')

    def check_address(self, order_response: OrderResponse | None) -> GateDecision:
        issue = self.get_address_issue(order_response)
        if issue != AddressIssue.NONE:
            return GateDecision(Template.WARNING, f'address validation {issue.value}')
        return GateDecision(reason='address has no issues')

    async def classify(self, order: Order, ruleset: RuleSet, order_response: OrderResponse | None) -> GateDecision:
        """Risk first, then address. The first gate that triggers wins."""
        if ruleset.risk_gate:
            decision = await self.check_risk(order, ruleset)
            if decision.triggered:
                return decision
        if ruleset.address_gate:
            decision = self.check_address(order_response)
            if decision.triggered:
                return decision
        return GateDecision()
