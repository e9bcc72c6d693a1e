"""DynamoDB repository for single-item key-value access."""

from typing import Any, Dict, Optional

import boto3


class DynamoDbRepository:
    """Get and conditionally put whole items by partition key."""

    def __init__(self, table_name: str, key_name: str = "identifier", table=None):
        self.key_name = key_name
        self.table = table if table is not None else boto3.resource("dynamodb").Table(table_name)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Fetch one item with a strongly consistent read."""
        resp = self.table.get_item(Key={self.key_name: key}, ConsistentRead=True)
        return resp.get("Item")

    def put_if_version(self, item: Dict[str, Any], expected_version: int) -> None:
        """
        Replace the item only if the stored ``version`` still equals
        ``expected_version`` (or the item does not exist yet when it is 0).
        """
        if expected_version == 0:
            self.table.put_item(
                Item=item,
                ConditionExpression="attribute_not_exists(#pk)",
                ExpressionAttributeNames={"#pk": self.key_name},
            )
            return

        self.table.put_item(
            Item=item,
            ConditionExpression="#v = :expected",
            ExpressionAttributeNames={"#v": "version"},
            ExpressionAttributeValues={":expected": expected_version},
        )
