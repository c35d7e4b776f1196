from botocore.exceptions import ClientError
import logging
from typing import Any, Dict, List
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
    from types_boto3_dynamodb import DynamoDBClient
else:
    Table = object
    DynamoDBClient = object


logger = logging.getLogger(__name__)


class DynamoRepository:
    def __init__(self, table: Table, client: DynamoDBClient = None):
        self.table = table
        self.client = client if client else table.meta.client

    def _query_all(self, **kwargs) -> List[Dict[str, Any]]:
        try:
            resp = self.table.query(**kwargs)
            items = list(resp.get("Items", []))
            while "LastEvaluatedKey" in resp:
                resp = self.table.query(
                    **kwargs, ExclusiveStartKey=resp["LastEvaluatedKey"]
                )
                items.extend(resp.get("Items", []))
        except ClientError as err:
            logger.error(f"Error querying {self.table.name}: {err}")
            raise
        return items

    def _scan_all(self, **kwargs) -> List[Dict[str, Any]]:
        try:
            resp = self.table.scan(**kwargs)
            items = list(resp.get("Items", []))
            while "LastEvaluatedKey" in resp:
                resp = self.table.scan(
                    **kwargs, ExclusiveStartKey=resp["LastEvaluatedKey"]
                )
                items.extend(resp.get("Items", []))
        except ClientError as err:
            logger.error(f"Error scanning {self.table.name}: {err}")
            raise
        return items
