"""
Price Fetcher Handler - Lambda function for audited price lookups.

    GET /price?id=<productId>&userId=<user> -> 200 {productId, price, currency}
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from catalog.constants import ERRORS
from catalog.handlers.pipeline import RequestSchema, health_check_response, install_pipeline, is_health_check
from catalog.handlers.utils.app_context import AppContext, get_app_context
from catalog.handlers.utils.errors import NotFoundError
from catalog.handlers.utils.observability import logger, metrics
from catalog.handlers.utils.responses import json_response
from catalog.handlers.utils.rest_api_resolver import PRICE_PATH, create_resolver
from catalog.logic.price_service import PriceService
from catalog.models.input import PriceRequest

PRICE_SCHEMAS = {
    (PRICE_PATH, 'GET'): RequestSchema(query=PriceRequest, required_query=('id', 'userId')),
}

app = create_resolver()
install_pipeline(app, PRICE_SCHEMAS)


@app.get(PRICE_PATH)
def get_price() -> Response:
    params: PriceRequest = app.context['params']
    app_context: AppContext = app.context['app_context']

    service = PriceService(pool=app_context.pool, audit=app_context.audit_sink, session=app.context['db_session'])
    quote = service.fetch_price(params.id, params.user_id)
    if quote is None:
        raise NotFoundError('Price', params.id, message=ERRORS['PRICE_NOT_FOUND'])

    return json_response(200, quote.to_response())


@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    if is_health_check(event):
        return health_check_response()

    app.append_context(app_context=get_app_context())
    return app.resolve(event, context)
