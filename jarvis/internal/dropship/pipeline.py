# jarvis/internal/dropship/pipeline.py
import traceback

from jarvis.config import Config
from jarvis.internal.dropship.gates import RiskClassifier
from jarvis.internal.dropship.notification import NotificationDispatcher
from jarvis.internal.dropship.resolver import FulfillmentResolver
from jarvis.internal.dropship.rules import RuleSet, get_ruleset
from jarvis.internal.gen.utilities import contains_tag
from jarvis.internal.integrations.mail import MailClient
from jarvis.internal.integrations.shopify import ShopifyException, ShopifyGraphQLClient, ShopifyRestClient
from jarvis.internal.log import factory_logger
from jarvis.models.pydantic.dropship import OrderOutcome, OutcomeStatus, QualificationResult, Template
from jarvis.models.pydantic.shopify.admin import OrderResponse
from jarvis.models.pydantic.shopify.order import Order

log_dropship = factory_logger('dropship', file=True)


async def qualify(order: Order, resolver: FulfillmentResolver, ruleset: RuleSet) -> QualificationResult:
    """Resolves line items one at a time and stops at the first one that fails the rule set."""
    country = order.shipping_address.country
    reason = ruleset.precheck(country, len(order.line_items))
    if reason:
        return QualificationResult(qualifies=False, reason=reason)

    items = []
    for line_item in order.line_items:
        item = await resolver.resolve(order, line_item)
        items.append(item)
        reason = ruleset.item_qualifies(country, item)
        if reason:
            return QualificationResult(qualifies=False, reason=f'{line_item.sku}: {reason}', items=items)

    return ruleset.conclude(items)


class OrderPipeline:
    """
    Decides whether a purchase order email goes to a supplier for one order and sends it.

    verify (router) -> resolve + qualify -> duplicate guard -> risk/address gates -> mail -> tag
    """

    def __init__(
        self,
        ruleset: RuleSet,
        resolver: FulfillmentResolver,
        classifier: RiskClassifier,
        dispatcher: NotificationDispatcher,
        graphql_client: ShopifyGraphQLClient,
        ordered_tag: str = Config.ordered_tag,
    ):
        self.ruleset = ruleset
        self.resolver = resolver
        self.classifier = classifier
        self.dispatcher = dispatcher
        self.graphql = graphql_client
        self.ordered_tag = ordered_tag

    @classmethod
    def default(cls) -> 'OrderPipeline':
        rest_client = ShopifyRestClient()
        graphql_client = ShopifyGraphQLClient()
        return cls(
            ruleset=get_ruleset(),
            resolver=FulfillmentResolver(rest_client),
            classifier=RiskClassifier(rest_client),
            dispatcher=NotificationDispatcher(MailClient(), graphql_client),
            graphql_client=graphql_client,
        )

    async def current_order(self, order: Order) -> OrderResponse | None:
        """Order as it is now on Shopify, a redelivered webhook carries the original tags."""
        try:
            return await self.graphql.get_order(order.gid)
        except ShopifyException as e:
            log_dropship.warning(f'Order {order.id}: GraphQL order lookup failed {e}')
            return None

    @staticmethod
    def current_tags(order: Order, order_response: OrderResponse | None) -> list[str]:
        if order_response is None:
            return order.tag_list
        return order_response.data.order.tags

    async def process(self, order: Order) -> OrderOutcome:
        qualification = await qualify(order, self.resolver, self.ruleset)
        if not qualification.qualifies:
            return OrderOutcome(order_id=order.id, status=OutcomeStatus.NOT_QUALIFIED, reason=qualification.reason)

        supplier = qualification.supplier
        order_response = await self.current_order(order)
        if contains_tag(self.current_tags(order, order_response), self.ordered_tag):
            return OrderOutcome(
                order_id=order.id,
                status=OutcomeStatus.ALREADY_ORDERED,
                supplier=supplier,
                reason=f'already tagged {self.ordered_tag}',
            )

        gate = await self.classifier.classify(order, self.ruleset, order_response)
        if gate.triggered:
            await self.dispatcher.send_review(gate.template, order, supplier, gate.reason)
            status = OutcomeStatus.RISK_REVIEW if gate.template == Template.RISK else OutcomeStatus.ADDRESS_WARNING
            return OrderOutcome(
                order_id=order.id, status=status, supplier=supplier, template=gate.template, reason=gate.reason
            )

        sent = await self.dispatcher.send_purchase_order(order, self.ruleset.supplier(supplier))
        if not sent:
            return OrderOutcome(
                order_id=order.id,
                status=OutcomeStatus.NOT_SENT,
                supplier=supplier,
                template=Template.STANDARD,
                reason='mail transport failed',
            )

        tagged = await self.dispatcher.tag_ordered(order)
        return OrderOutcome(
            order_id=order.id, status=OutcomeStatus.SENT, supplier=supplier, template=Template.STANDARD, tagged=tagged
        )


async def process_order_webhook(order: Order, pipeline: OrderPipeline | None = None) -> OrderOutcome | None:
    """
    Background phase of the orders/create webhook. Shopify already got its 200, so this is
    fire-and-forget: nothing is retried and failures are only visible in the logs.
    """
    try:
        pipeline = pipeline or OrderPipeline.default()
        outcome = await pipeline.process(order)
    except Exception:
        log_dropship.error(f'Order {order.id}: unexpected failure {traceback.format_exc()}')
        return None

    log_dropship.info(
        f'Order {order.id} ({order.name}): {outcome.status} supplier={outcome.supplier or "-"} '
        f'tagged={outcome.tagged} {outcome.reason}'.strip()
    )
    return outcome
