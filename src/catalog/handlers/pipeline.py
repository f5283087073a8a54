"""
Request pipeline shared by the catalog handlers.

Each API Gateway invocation flows through the same middleware chain, outermost
first:

1. observability  - trace span, per-request log line and outcome counters
2. routing        - 405 for a known path with an unserved method; unknown paths
                    skip every later stage and reach the 404 handler
3. session        - checks out a database session and always releases it
4. error mapping  - domain errors become 400/404 responses
5. normalization  - lower-cased headers, query string and parsed JSON body
6. validation     - (path, method) schema table, 400 with field details on failure
7. dispatch       - the resolver route for the HTTP method

Unrecognised exceptions pass through error mapping untouched; the session is
still released, and the resolver's generic exception handler answers 500.
"""

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple, Type

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, Response
from aws_lambda_powertools.event_handler.exceptions import NotFoundError as RouteNotFoundError
from aws_lambda_powertools.event_handler.middlewares import NextMiddleware
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from catalog.constants import ANONYMOUS_ACTOR, ERROR_CODES, ERRORS
from catalog.dal.session import acquire_session, release_session
from catalog.handlers.utils.errors import (
    BaseServiceError,
    InfrastructureError,
    MethodNotAllowedError,
    ValidationError,
    format_error_response,
    log_error_metrics,
)
from catalog.handlers.utils.observability import count, logger, span
from catalog.handlers.utils.responses import error_response, json_response

BODY_METHODS = ('POST', 'PUT')

# Answered by the resolver itself (CORS preflight), never rejected with 405
PASSTHROUGH_METHODS = ('OPTIONS',)


def is_health_check(event: Any) -> bool:
    """Health checks carry a top-level health_check flag and skip the pipeline."""
    return isinstance(event, dict) and bool(event.get('health_check'))


def health_check_response() -> Dict[str, Any]:
    return {'statusCode': 200, 'body': 'OK'}


def normalize_headers(headers: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {str(name).lower(): value for name, value in (headers or {}).items()}


def resolve_actor(raw_event: Dict[str, Any]) -> str:
    """Authorizer subject claim, then the x-user-id header, then anonymous."""
    authorizer = (raw_event.get('requestContext') or {}).get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    if claims.get('sub'):
        return str(claims['sub'])

    header_user = normalize_headers(raw_event.get('headers')).get('x-user-id')
    return str(header_user) if header_user else ANONYMOUS_ACTOR


def parse_body(body: Any, is_base64_encoded: bool = False) -> Dict[str, Any]:
    """
    Parse the transport body into a dict.

    Raises:
        ValidationError: If the body is not a JSON object
    """
    if body is None or body == '':
        return {}
    if isinstance(body, dict):
        return body

    try:
        if is_base64_encoded:
            body = base64.b64decode(body).decode('utf-8')
        payload = json.loads(body)
    except (ValueError, TypeError):
        raise ValidationError(ERRORS['INVALID_JSON'])

    if not isinstance(payload, dict):
        raise ValidationError(ERRORS['INVALID_JSON'])
    return payload


def _field_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    return [
        {
            'field': '.'.join(str(part) for part in error['loc']) or 'body',
            'message': error['msg'].removeprefix('Value error, '),
        }
        for error in exc.errors()
    ]


def parse_model(model: Type[BaseModel], data: Dict[str, Any]) -> BaseModel:
    """Validate raw input against a schema, or raise ValidationError with field details."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        count('ValidationError')
        raise ValidationError(field_errors=_field_errors(exc))


@dataclass(frozen=True)
class RequestSchema:
    """Validation rules for one HTTP method of a route."""

    query: Optional[Type[BaseModel]] = None
    body: Optional[Type[BaseModel]] = None
    required_query: Tuple[str, ...] = field(default_factory=tuple)
    missing_message: str = ERRORS['VALIDATION_FAILED']
    missing_code: str = ERROR_CODES['VALIDATION_ERROR']

    def validate(self, query: Dict[str, Any], payload: Dict[str, Any]) -> Dict[str, Any]:
        missing = [name for name in self.required_query if not str(query.get(name) or '').strip()]
        if missing:
            count('ValidationError')
            raise ValidationError(
                message=self.missing_message,
                error_code=self.missing_code,
                field_errors=[{'field': name, 'message': self.missing_message} for name in missing],
            )

        return {
            'params': parse_model(self.query, query) if self.query else None,
            'body': parse_model(self.body, payload) if self.body else None,
        }


SchemaTable = Dict[Tuple[str, str], RequestSchema]


def observability_middleware(app: APIGatewayRestResolver, next_middleware: NextMiddleware) -> Response:
    event = app.current_event
    method = event.http_method
    actor = resolve_actor(event.raw_event)

    with span('request_pipeline', http_method=method, path=event.path):
        try:
            response = next_middleware(app)
        except Exception:
            count('RequestFault')
            logger.info('Request finished', extra={'http_method': method, 'outcome': 'FAULT', 'actor': actor})
            raise

    if response.status_code >= 500:
        outcome = 'FAULT'
    elif response.status_code >= 400:
        outcome = 'CLIENT_ERROR'
    else:
        outcome = 'SUCCESS'
    count({'SUCCESS': 'RequestSuccess', 'CLIENT_ERROR': 'RequestClientError', 'FAULT': 'RequestFault'}[outcome])
    logger.info('Request finished', extra={
        'http_method': method,
        'outcome': outcome,
        'status_code': response.status_code,
        'actor': actor,
    })
    return response


def route_path(path: str) -> str:
    return path.rstrip('/') or '/'


def _is_routed(app: APIGatewayRestResolver) -> bool:
    return bool(app.context.get('routed'))


def build_routing_middleware(schemas: SchemaTable):
    """Routing stage: 405 for unserved methods on a known path, pass-through for unknown paths."""
    methods_by_path: Dict[str, Set[str]] = {}
    for path, method in schemas:
        methods_by_path.setdefault(path, set()).add(method)

    def routing_middleware(app: APIGatewayRestResolver, next_middleware: NextMiddleware) -> Response:
        method = app.current_event.http_method
        allowed = methods_by_path.get(route_path(app.current_event.path))

        if allowed is not None and method not in allowed and method not in PASSTHROUGH_METHODS:
            error = MethodNotAllowedError(method)
            log_error_metrics(error)
            return json_response(405, format_error_response(error), headers={'Allow': ', '.join(sorted(allowed))})

        app.append_context(routed=allowed is not None and method in allowed)
        return next_middleware(app)

    return routing_middleware


def session_middleware(app: APIGatewayRestResolver, next_middleware: NextMiddleware) -> Response:
    """Check out one session for the request and release it on every exit path."""
    if not _is_routed(app):
        return next_middleware(app)

    session, owns = acquire_session(app.context['app_context'].pool)
    app.append_context(db_session=session)
    try:
        return next_middleware(app)
    finally:
        release_session(session, owns)


def error_mapping_middleware(app: APIGatewayRestResolver, next_middleware: NextMiddleware) -> Response:
    try:
        return next_middleware(app)
    except BaseServiceError as exc:
        if exc.http_status >= 500:
            raise
        log_error_metrics(exc)
        return error_response(exc)


def normalize_middleware(app: APIGatewayRestResolver, next_middleware: NextMiddleware) -> Response:
    if not _is_routed(app):
        return next_middleware(app)

    raw_event = app.current_event.raw_event
    method = app.current_event.http_method

    payload: Dict[str, Any] = {}
    if method in BODY_METHODS:
        payload = parse_body(raw_event.get('body'), bool(raw_event.get('isBase64Encoded')))

    app.append_context(
        headers=normalize_headers(raw_event.get('headers')),
        query=dict(raw_event.get('queryStringParameters') or {}),
        payload=payload,
        actor=resolve_actor(raw_event),
    )
    return next_middleware(app)


def build_validation_middleware(schemas: SchemaTable):
    """Validation stage driven by a (path, method) -> schema table."""

    def validation_middleware(app: APIGatewayRestResolver, next_middleware: NextMiddleware) -> Response:
        if _is_routed(app):
            event = app.current_event
            schema = schemas[(route_path(event.path), event.http_method)]
            app.append_context(**schema.validate(app.context['query'], app.context['payload']))
        return next_middleware(app)

    return validation_middleware


def install_pipeline(app: APIGatewayRestResolver, schemas: SchemaTable, with_session: bool = True) -> None:
    """
    Register the middleware chain and the terminal error handlers on a resolver.

    Args:
        app: Resolver whose routes match the keys of ``schemas``
        schemas: One RequestSchema per served (path, method)
        with_session: Check out a database session for routed requests
    """
    middlewares = [observability_middleware, build_routing_middleware(schemas)]
    if with_session:
        middlewares.append(session_middleware)
    middlewares.extend([error_mapping_middleware, normalize_middleware, build_validation_middleware(schemas)])
    app.use(middlewares=middlewares)

    @app.not_found
    def handle_route_not_found(exc: RouteNotFoundError) -> Response:
        logger.info('Route not found', extra={'path': app.current_event.path})
        return json_response(404, {'code': ERROR_CODES['NOT_FOUND'], 'message': ERRORS['ROUTE_NOT_FOUND']})

    @app.exception_handler(BaseServiceError)
    def handle_service_error(exc: BaseServiceError) -> Response:
        # 5xx service errors and anything raised outside the error mapping stage
        if isinstance(exc, InfrastructureError):
            logger.error('Infrastructure failure', extra=exc.to_dict())
        else:
            log_error_metrics(exc)
        return error_response(exc)

    @app.exception_handler(Exception)
    def handle_unexpected_error(exc: Exception) -> Response:
        # counted as RequestFault by the observability stage
        logger.exception('Unexpected error in handler', extra={'error_type': type(exc).__name__})
        return error_response(exc)
