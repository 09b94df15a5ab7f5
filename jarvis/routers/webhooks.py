# jarvis/routers/webhooks.py
import json
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status

from jarvis.internal.dropship.pipeline import process_order_webhook
from jarvis.internal.log import factory_logger
from jarvis.models.pydantic.shopify.order import Order
from jarvis.routers.auth import hmac_validation_shopify

log_webhooks = factory_logger('webhooks', file=True)

router = APIRouter(
    prefix='/webhook',
    tags=['Webhooks'],
)


@router.post(
    '/orders/create',
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(hmac_validation_shopify)],
)
async def receive_order_created(request: Request, background_tasks: BackgroundTasks):
    # Same bytes the HMAC was computed over
    body = await request.body()
    try:
        order = Order(**json.loads(body))
    except (ValueError, TypeError) as e:  # JSONDecodeError and ValidationError are ValueError
        log_webhooks.error(f'Invalid orders/create payload: {e}')
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail='Invalid order payload')

    log_webhooks.info(
        f'New order received: {order.id} {order.name} webhook_id={request.headers.get("x-shopify-webhook-id", "")}'
    )
    # Shopify retries deliveries slower than 5 seconds, processing happens after the response
    background_tasks.add_task(process_order_webhook, order)

    return {'status': 'received', 'order_id': order.id}
