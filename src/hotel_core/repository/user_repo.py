from botocore.exceptions import ClientError
import logging
from typing import List, Optional
from boto3.dynamodb.conditions import Attr, Key

from hotel_core.models.users import User, UserRole
from hotel_core.repository.base import DynamoRepository
from hotel_core.utils.custom_exceptions import DuplicateEmail, NotFoundException

logger = logging.getLogger(__name__)


class UserRepository(DynamoRepository):
    def add_user(self, user: User):
        try:
            self.client.transact_write_items(
                TransactItems=[
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                "pk": f"EMAIL#{user.email.lower()}",
                                "sk": f"USER#{user.user_id}",
                            },
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                    {
                        "Put": {
                            "TableName": self.table.name,
                            "Item": {
                                "pk": f"USER#{user.user_id}",
                                "sk": "DETAILS",
                                "email": user.email,
                                "first_name": user.first_name,
                                "last_name": user.last_name,
                                "phone": user.phone,
                                "password": user.password,
                                "role": user.role.value,
                            },
                            "ConditionExpression": "attribute_not_exists(pk)",
                        }
                    },
                ]
            )

        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "TransactionCanceledException":
                raise DuplicateEmail("email is already in use")
            logger.error(
                "couldn't add user %s. Error: %s",
                user.email,
                err.response["Error"]["Message"],
            )
            raise

    def get_by_mail(self, mail: str) -> Optional[User]:
        try:
            response = self.table.query(
                KeyConditionExpression=(
                    Key("pk").eq(f"EMAIL#{mail.lower()}") & Key("sk").begins_with("USER#")
                )
            )
        except ClientError as err:
            logger.error(f"Error retrieving user by mail {mail}: {err}")
            raise

        items = response.get("Items", [])
        if not items:
            return None

        user_id = items[0]["sk"].split("#", 1)[1]
        return self.get_by_id(user_id=user_id)

    def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            response = self.table.get_item(
                Key={"pk": f"USER#{user_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving user by id {user_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None

        return self._to_domain(item=item)

    def list_users(self) -> List[User]:
        items = self._scan_all(
            FilterExpression=Attr("pk").begins_with("USER#") & Attr("sk").eq("DETAILS")
        )
        return [self._to_domain(item=item) for item in items]

    def update_role(self, user_id: str, role: UserRole) -> User:
        try:
            response = self.table.update_item(
                Key={"pk": f"USER#{user_id}", "sk": "DETAILS"},
                UpdateExpression="SET #role = :role",
                ExpressionAttributeNames={"#role": "role"},
                ExpressionAttributeValues={":role": role.value},
                ConditionExpression="attribute_exists(pk)",
                ReturnValues="ALL_NEW",
            )
        except ClientError as err:
            if err.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise NotFoundException("user", user_id, 404)
            logger.error(f"Error updating role of user {user_id}: {err}")
            raise
        return self._to_domain(item=response["Attributes"])

    @staticmethod
    def _to_domain(item: dict) -> User:
        return User(
            user_id=item["pk"].split("#", 1)[1],
            email=item["email"],
            first_name=item["first_name"],
            last_name=item["last_name"],
            phone=item.get("phone"),
            role=UserRole(item["role"]),
            password=item.get("password"),
        )
