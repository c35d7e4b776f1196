from botocore.exceptions import ClientError
import logging
from datetime import datetime
from typing import Any, Dict, List
from boto3.dynamodb.conditions import Key

from hotel_core.models.notifications import (
    Notification,
    NotificationChannel,
    NotificationStatus,
)
from hotel_core.repository.base import DynamoRepository
from hotel_core.utils.custom_exceptions import NotFoundException
from hotel_core.utils.dates import from_iso_string, to_iso_string

logger = logging.getLogger(__name__)


class NotificationRepository(DynamoRepository):
    @staticmethod
    def _to_domain(item: Dict[str, Any]) -> Notification:
        sent_at = item.get("sent_at")
        return Notification(
            notification_id=item["notification_id"],
            user_id=item["user_id"],
            booking_id=item.get("booking_id"),
            channel=NotificationChannel(item["channel"]),
            title=item["title"],
            message=item["message"],
            status=NotificationStatus(item["notification_status"]),
            sent_at=from_iso_string(sent_at) if sent_at else None,
            created_at=from_iso_string(item["created_at"]),
        )

    def add_notification(self, notification: Notification):
        try:
            self.table.put_item(
                Item={
                    "pk": f"USER#{notification.user_id}",
                    "sk": f"NOTIFICATION#{notification.notification_id}",
                    "notification_id": notification.notification_id,
                    "user_id": notification.user_id,
                    "booking_id": notification.booking_id,
                    "channel": notification.channel.value,
                    "title": notification.title,
                    "message": notification.message,
                    "notification_status": notification.status.value,
                    "sent_at": None,
                    "created_at": to_iso_string(notification.created_at),
                }
            )
        except ClientError as err:
            logger.error(f"Error creating notification {notification.notification_id}: {err}")
            raise

    def get_user_notifications(self, user_id: str) -> List[Notification]:
        items = self._query_all(
            KeyConditionExpression=(
                Key("pk").eq(f"USER#{user_id}") & Key("sk").begins_with("NOTIFICATION#")
            )
        )
        return [self._to_domain(item) for item in items]

    def mark_sent(self, user_id: str, notification_id: str, sent_at: datetime) -> Notification:
        try:
            response = self.table.update_item(
                Key={"pk": f"USER#{user_id}", "sk": f"NOTIFICATION#{notification_id}"},
                UpdateExpression="SET #status = :status, #sent_at = :sent_at",
                ExpressionAttributeNames={"#status": "notification_status", "#sent_at": "sent_at"},
                ExpressionAttributeValues={
                    ":status": NotificationStatus.SENT.value,
                    ":sent_at": to_iso_string(sent_at),
                },
                ConditionExpression="attribute_exists(pk)",
                ReturnValues="ALL_NEW",
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise NotFoundException("notification", notification_id, 404)
            logger.error(f"Error updating notification {notification_id}: {err}")
            raise
        return self._to_domain(response["Attributes"])
