"""
Products Handler - Lambda function for product management API.

Routes one resource, /product, by HTTP method:

    POST   /product          {name, price, category?, description?} -> 201 Product
    GET    /product?id=                                            -> 200 Product
    PUT    /product?id=      {name?, price?, status?}               -> 200 Product
    DELETE /product?id=                                            -> 204

Any other method on /product is answered with 405.

All routes run behind the shared request pipeline (see catalog.handlers.pipeline).
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from catalog.constants import ERRORS
from catalog.handlers.pipeline import RequestSchema, health_check_response, install_pipeline, is_health_check
from catalog.handlers.utils.app_context import AppContext, get_app_context
from catalog.handlers.utils.observability import logger, metrics
from catalog.handlers.utils.responses import empty_response, json_response
from catalog.handlers.utils.rest_api_resolver import PRODUCT_PATH, create_resolver
from catalog.logic.product_service import ProductService
from catalog.models.input import CreateProductRequest, ProductIdQuery, UpdateProductRequest

_ID_QUERY = dict(query=ProductIdQuery, required_query=('id',), missing_message=ERRORS['MISSING_ID'])

PRODUCT_SCHEMAS = {
    (PRODUCT_PATH, 'POST'): RequestSchema(body=CreateProductRequest),
    (PRODUCT_PATH, 'GET'): RequestSchema(**_ID_QUERY),
    (PRODUCT_PATH, 'PUT'): RequestSchema(body=UpdateProductRequest, **_ID_QUERY),
    (PRODUCT_PATH, 'DELETE'): RequestSchema(**_ID_QUERY),
}

app = create_resolver()
install_pipeline(app, PRODUCT_SCHEMAS)


def _product_service() -> ProductService:
    app_context: AppContext = app.context['app_context']
    return ProductService(
        pool=app_context.pool,
        audit=app_context.audit_sink,
        session=app.context['db_session'],
    )


@app.post(PRODUCT_PATH)
def create_product() -> Response:
    product = _product_service().create_product(app.context['actor'], app.context['body'])
    logger.info('Product created', extra={'product_id': product.id})
    return json_response(201, product.to_response())


@app.get(PRODUCT_PATH)
def get_product() -> Response:
    params: ProductIdQuery = app.context['params']
    settings = app.context['app_context'].settings
    include_deleted = params.include_deleted and settings.ALLOW_DELETED_READS

    product = _product_service().get_product(params.id, include_deleted=include_deleted)
    return json_response(200, product.to_response())


@app.put(PRODUCT_PATH)
def update_product() -> Response:
    params: ProductIdQuery = app.context['params']
    product = _product_service().update_product(app.context['actor'], params.id, app.context['body'])
    return json_response(200, product.to_response())


@app.delete(PRODUCT_PATH)
def delete_product() -> Response:
    params: ProductIdQuery = app.context['params']
    _product_service().delete_product(app.context['actor'], params.id)
    return empty_response(204)


@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Main Lambda handler function.

    Args:
        event: Lambda event payload
        context: Lambda context object

    Returns:
        API Gateway response
    """
    if is_health_check(event):
        return health_check_response()

    app.append_context(app_context=get_app_context())
    return app.resolve(event, context)
