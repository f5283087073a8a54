"""
Lambda handlers for the product catalog.

Each handler module owns one API Gateway REST resolver and exposes a
``lambda_handler`` entry point:

- products_handler: product CRUD with soft delete
- price_handler: audited price lookups
- config_handler: per-user configuration retrieval

All of them run behind the middleware chain in ``catalog.handlers.pipeline``.
"""

__version__ = "1.0.0"
