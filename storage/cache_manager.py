"""DynamoDB-backed cache for the serialized calendar."""
import json
import logging
import time
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class CalendarCacheManager:
    """Key/value cache with per-item expiry stored in a DynamoDB table."""

    CACHE_KEY = 'events'
    DEFAULT_TTL_SECONDS = 300

    def __init__(self, table_name: str, region_name: Optional[str] = None):
        """
        Initialize DynamoDB client and table reference.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region (default: taken from the environment)
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized CalendarCacheManager for table: {table_name}")

    def put_calendar(
        self,
        calendar: Dict[str, Any],
        ttl_seconds: int = DEFAULT_TTL_SECONDS
    ) -> None:
        """
        Store the serialized calendar, replacing any previous value.

        The item carries an `expires_at` epoch timestamp that doubles as the
        table's TTL attribute.

        Args:
            calendar: JSON-compatible calendar structure
            ttl_seconds: Seconds until the entry expires (default: 300)

        Raises:
            ClientError: If the write fails
        """
        item = {
            'cache_key': self.CACHE_KEY,
            'value': json.dumps(calendar),
            'expires_at': int(time.time()) + ttl_seconds
        }

        try:
            self.table.put_item(Item=item)
        except ClientError as e:
            logger.error(f"Error writing calendar to cache: {e}")
            raise

        logger.info(f"Cached calendar under '{self.CACHE_KEY}' for {ttl_seconds} seconds")

    def get_calendar(self) -> Optional[Dict[str, Any]]:
        """
        Read the serialized calendar.

        DynamoDB removes expired items lazily, so an item past its
        `expires_at` is treated as missing.

        Returns:
            The calendar structure, or None if absent or expired

        Raises:
            ClientError: If the read fails
        """
        try:
            response = self.table.get_item(Key={'cache_key': self.CACHE_KEY})
        except ClientError as e:
            logger.error(f"Error reading calendar from cache: {e}")
            raise

        item = response.get('Item')
        if not item:
            return None

        if int(item['expires_at']) <= int(time.time()):
            logger.info("Cached calendar has expired")
            return None

        return json.loads(item['value'])
