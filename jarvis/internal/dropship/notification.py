# jarvis/internal/dropship/notification.py
from html import escape

from jarvis.config import Config
from jarvis.internal.dropship.rules import SupplierProfile
from jarvis.internal.gen.utilities import normalize_unit
from jarvis.internal.integrations.mail import MailClient, MailException
from jarvis.internal.integrations.shopify import ShopifyException, ShopifyGraphQLClient
from jarvis.internal.log import factory_logger
from jarvis.models.pydantic.dropship import ProductDetail, ShippingDetails, Template
from jarvis.models.pydantic.shopify.order import Order

log_dropship = factory_logger('dropship', file=True)


def build_shipping_details(order: Order) -> ShippingDetails:
    address = order.shipping_address
    unit = normalize_unit(address.address2)
    street = ', '.join(x for x in [address.address1, unit.strip()] if x)
    return ShippingDetails(
        name=f'{address.first_name} {address.last_name}'.strip(),
        address=f'{street}, {address.city}, {address.province_code} {address.zip} {address.country}',
        contact_number=address.phone,
        po_number=str(order.order_number),
    )


def build_product_details(order: Order) -> list[ProductDetail]:
    return [
        ProductDetail(sku=item.sku, title=item.display_title, quantity=item.quantity, net_price=item.net_price)
        for item in order.line_items
    ]


def _shipping_html(shipping: ShippingDetails) -> str:
    return f"""
      <p><strong>Shipping Details:</strong></p>
      <ul>
        <li><strong>Name:</strong> {escape(shipping.name)}</li>
        <li><strong>Address:</strong> {escape(shipping.address)}</li>
        <li><strong>Contact Number:</strong> {escape(shipping.contact_number)}</li>
      </ul>"""


def _products_html(products: list[ProductDetail], po_number: str) -> str:
    items = ''.join(
        f"""
        <li>
          <strong>SKU:</strong> {escape(product.sku)}<br>
          <strong>Product Title:</strong> {escape(product.title)}<br>
          <strong>Quantity:</strong> {product.quantity}<br>
          <strong>Net Price:</strong> ${product.net_price:.2f}
        </li>"""
        for product in products
    )
    return f"""
      <p><strong>Product Details:</strong></p>
      <ul>{items}
      </ul>
      <p><strong>PO #:</strong> {escape(po_number)}</p>"""


def render_standard(supplier: SupplierProfile, shipping: ShippingDetails, products: list[ProductDetail]) -> str:
    account = f' on behalf of our account number {escape(supplier.account_number)}' if supplier.account_number else ''
    return f"""
  <html>
    <body>
      <p>{escape(supplier.salutation)}</p>
      <p>I hope this message finds you well. We are writing to formally place an order{account} and would appreciate your assistance in processing it promptly.</p>
      {_shipping_html(shipping)}
      {_products_html(products, shipping.po_number)}
      <p>Please confirm this order and send the product. Please send the Order Confirmation, Invoice, and Tracking number. Also, please share the ETA for this product.</p>
    </body>
  </html>
"""


def render_review(template: Template, supplier: str, reason: str, shipping: ShippingDetails, products: list[ProductDetail]) -> str:
    heading = 'High risk order' if template == Template.RISK else 'Shipping address needs review'
    return f"""
  <html>
    <body>
      <p><strong>{heading}</strong></p>
      <p>Order {escape(shipping.po_number)} qualifies for a purchase order to {escape(supplier)}, but it was held: {escape(reason)}.</p>
      <p>No purchase order was sent and the order was not tagged. Review it in Shopify and place the order manually if it is legitimate.</p>
      {_shipping_html(shipping)}
      {_products_html(products, shipping.po_number)}
    </body>
  </html>
"""


SUBJECTS = {
    Template.STANDARD: 'Purchase Order: {po_number}',
    Template.RISK: 'Risk Review Required - Order {po_number}',
    Template.WARNING: 'Address Review Required - Order {po_number}',
}


class NotificationDispatcher:
    def __init__(
        self,
        mail_client: MailClient,
        graphql_client: ShopifyGraphQLClient,
        recipients: dict[Template, list[str]] | None = None,
        ordered_tag: str = Config.ordered_tag,
    ):
        self.mail = mail_client
        self.graphql = graphql_client
        self.recipients = recipients or {
            Template.STANDARD: Config.mail_recipients,
            Template.RISK: Config.mail_risk_recipients,
            Template.WARNING: Config.mail_warning_recipients,
        }
        self.ordered_tag = ordered_tag

    async def send(self, template: Template, order: Order, html: str) -> bool:
        subject = SUBJECTS[template].format(po_number=order.order_number)
        try:
            await self.mail.send(self.recipients.get(template, []), subject, html)
        except MailException as e:
            log_dropship.error(f'Order {order.id}: {template.value} mail not sent {e}')
            return False
        return True

    async def send_purchase_order(self, order: Order, supplier: SupplierProfile) -> bool:
        html = render_standard(supplier, build_shipping_details(order), build_product_details(order))
        return await self.send(Template.STANDARD, order, html)

    async def send_review(self, template: Template, order: Order, supplier: str, reason: str) -> bool:
        html = render_review(template, supplier, reason, build_shipping_details(order), build_product_details(order))
        return await self.send(template, order, html)

    async def tag_ordered(self, order: Order) -> bool:
        """tagsAdd leaves existing tags alone, adding a tag twice is a no-op."""
        try:
            tagged = await self.graphql.taggs_add(id=order.gid, tags=[self.ordered_tag])
        except ShopifyException as e:
            log_dropship.error(f'Order {order.id}: tag update failed {e}')
            return False
        if not tagged:
            log_dropship.error(f'Order {order.id}: tag update rejected')
        return tagged
