"""Per-user application configuration stored in DynamoDB."""

from typing import Any, Dict

from catalog.handlers.utils.observability import logger


class ConfigRepository:

    def __init__(self, table: Any) -> None:
        self.table = table

    def get_user_config(self, user_id: str) -> Dict[str, Any]:
        """Return the user's config item, or an empty dict when none is stored."""
        response = self.table.get_item(Key={'pk': f'USER#{user_id}', 'sk': 'CONFIG'})
        item = response.get('Item')
        if not item:
            logger.info('No config stored for user', extra={'user_id': user_id})
            return {}
        return item
