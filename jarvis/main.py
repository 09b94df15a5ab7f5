# main.py
from fastapi import FastAPI

from jarvis.internal.dropship.rules import get_ruleset
from jarvis.routers import webhooks
from jarvis.internal.log import factory_logger

logger = factory_logger('main', file=False)

app = FastAPI(
    title='Jarvis',
    description='Receives Shopify orders/create webhooks and emails drop-ship purchase orders to suppliers.',
    version='1.0.0',
)

# Shopify webhooks
app.include_router(webhooks.router)


@app.get('/', tags=['Root'])
async def read_root():
    """Liveness check."""
    return {'message': 'Jarvis webhook receiver', 'ruleset': get_ruleset().version}
