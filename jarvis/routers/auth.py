# jarvis/routers/auth.py
import base64
import hashlib
import hmac
from fastapi import HTTPException, Request, status

from jarvis.config import config
from jarvis.internal.log import factory_logger

log_webhooks = factory_logger('webhooks', file=True)


class AuthException:
    hmac_validation_failed = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail='Unauthorized - Invalid HMAC',
    )


def calculate_hmac_shopify(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode('utf-8'), msg=body, digestmod=hashlib.sha256).digest()
    return base64.b64encode(digest).decode('utf-8')


def verify_hmac_shopify(body: bytes, received_hmac: str | None, secret: str) -> bool:
    """
    Shopify signs the raw body with HMAC-SHA256 and sends it base64 encoded in X-Shopify-Hmac-Sha256.
    https://shopify.dev/docs/apps/build/webhooks/subscribe/https#step-2-validate-the-origin-of-your-webhook-to-ensure-its-coming-from-shopify

    It must run over the exact bytes received, re-serialized JSON does not match.
    """
    if not secret or not received_hmac:
        return False
    # compare_digest is constant time, bytes so a non-ASCII header is a mismatch and not a TypeError
    expected = calculate_hmac_shopify(body, secret).encode('utf-8')
    return hmac.compare_digest(expected, received_hmac.encode('utf-8', 'surrogateescape'))


# Webhooks Shopify
async def hmac_validation_shopify(request: Request) -> bool:
    body = await request.body()
    received_hmac = request.headers.get('x-shopify-hmac-sha256', '')
    if not config.webhook_secret_shopify:
        log_webhooks.error('SHOPIFY_WEBHOOK_SECRET not set, rejecting webhook')
    if not verify_hmac_shopify(body, received_hmac, config.webhook_secret_shopify):
        log_webhooks.warning(f'Invalid HMAC for {request.url.path}')
        raise AuthException.hmac_validation_failed
    return True
