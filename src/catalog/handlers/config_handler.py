"""
Config Service Handler - Lambda function returning per-user configuration.

    GET /config?userId=<user> -> 200 config item, or {} when none is stored

Reads DynamoDB only, so the pipeline runs without a database session.
"""

from typing import Any, Dict

from aws_lambda_powertools.event_handler import Response
from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.utilities.typing import LambdaContext

from catalog.constants import ERROR_CODES, ERRORS
from catalog.dal.config_repository import ConfigRepository
from catalog.handlers.pipeline import RequestSchema, health_check_response, install_pipeline, is_health_check
from catalog.handlers.utils.app_context import AppContext, get_app_context
from catalog.handlers.utils.observability import count, logger, metrics, span
from catalog.handlers.utils.responses import json_response
from catalog.handlers.utils.rest_api_resolver import CONFIG_PATH, create_resolver
from catalog.models.input import ConfigRequest

CONFIG_SCHEMAS = {
    (CONFIG_PATH, 'GET'): RequestSchema(
        query=ConfigRequest,
        required_query=('userId',),
        missing_message=ERRORS['MISSING_USER_ID'],
        missing_code=ERROR_CODES['MISSING_USER_ID'],
    ),
}

app = create_resolver()
install_pipeline(app, CONFIG_SCHEMAS, with_session=False)


@app.get(CONFIG_PATH)
def get_config() -> Response:
    params: ConfigRequest = app.context['params']
    app_context: AppContext = app.context['app_context']

    with span('get_user_config'):
        config = ConfigRepository(app_context.config_table).get_user_config(params.user_id)

    count('ConfigFetched')
    return json_response(200, config)


@logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
@metrics.log_metrics(capture_cold_start_metric=True)
def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    if is_health_check(event):
        return health_check_response()

    app.append_context(app_context=get_app_context())
    return app.resolve(event, context)
