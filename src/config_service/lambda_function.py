"""
Config Service Lambda Function - Entry point for per-user configuration.

This module serves as the Lambda function entry point and delegates to the
handler in catalog.handlers.config_handler.
"""

import os
import sys
from typing import Any, Dict

# Add the catalog package to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aws_lambda_powertools.utilities.typing import LambdaContext
from catalog.handlers.config_handler import lambda_handler as config_handler


def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    return config_handler(event, context)
