"""
Products Lambda Function - Entry point for product CRUD API.

This module serves as the Lambda function entry point and delegates to the
handler in catalog.handlers.products_handler.
"""

import os
import sys
from typing import Any, Dict

# Add the catalog package to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from catalog.handlers.products_handler import lambda_handler as products_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Lambda function entry point for the products API.

    Delegates to the products handler, which runs the shared request pipeline
    (session scoping, validation, error mapping, observability).

    Args:
        event: Lambda event payload (API Gateway event)
        context: Lambda context object

    Returns:
        API Gateway response dictionary
    """
    return products_handler(event, context)
