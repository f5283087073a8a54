"""
Shared constants for the product catalog functions.

Business limits, user-facing error messages and the canonical error codes
returned in every error response body.
"""

MAX_PRODUCT_PRICE = 10000
MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

# Audit records expire automatically after this many days (compliance window)
DEFAULT_AUDIT_TTL_DAYS = 90

ANONYMOUS_ACTOR = 'anonymous'

ERRORS = {
    'PRICE_TOO_HIGH': f'Price cannot exceed {MAX_PRODUCT_PRICE}',
    'INVALID_NAME': f'Name must be at least {MIN_NAME_LENGTH} characters',
    'PRODUCT_NOT_FOUND': 'Product not found',
    'PRICE_NOT_FOUND': 'Price not found',
    'MISSING_ID': 'Product ID is required',
    'MISSING_USER_ID': 'Missing userId',
    'ALREADY_DELETED': 'Cannot update a deleted product',
    'EMPTY_UPDATE': 'At least one of name, price or status must be provided',
    'INVALID_JSON': 'Invalid JSON in request body',
    'VALIDATION_FAILED': 'Request validation failed',
    'METHOD_NOT_ALLOWED': 'Method not allowed',
    'ROUTE_NOT_FOUND': 'Route not found',
    'DB_UNAVAILABLE': 'Database connection could not be acquired',
    'INTERNAL': 'An unexpected error occurred',
}

ERROR_CODES = {
    'VALIDATION_ERROR': 'VAL_001',
    'INVALID_STATE': 'STATE_001',
    'NOT_FOUND': 'ERR_404',
    'METHOD_NOT_ALLOWED': 'ERR_405',
    'INTERNAL_SERVER_ERROR': 'ERR_500',
    'DB_CONNECTION_ERROR': 'DB_001',
    'MISSING_USER_ID': 'AUTH_001',
}
