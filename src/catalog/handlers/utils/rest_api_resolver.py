"""
REST API resolver utility for the catalog Lambda handlers.

This module provides the API path constants and a factory for configured
API Gateway REST resolvers.
"""

from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig

# API path constants
PRODUCT_PATH = '/product'
PRICE_PATH = '/price'
CONFIG_PATH = '/config'

cors_config = CORSConfig(
    allow_origin='*',
    max_age=600,
    allow_headers=['content-type', 'authorization', 'x-user-id'],
)


def create_resolver() -> APIGatewayRestResolver:
    """API Gateway REST resolver with CORS; request validation is done by the pipeline."""
    return APIGatewayRestResolver(cors=cors_config, enable_validation=False)
