from boto3 import resource

from hotel_core.utils.config import get_settings


def get_table():
    settings = get_settings()
    dynamodb = resource("dynamodb", region_name=settings.aws_region)
    return dynamodb.Table(settings.table_name)


def is_conditional_failure(err) -> bool:
    """True when a ClientError was caused by a failed ConditionExpression.

    Covers both single-item writes and cancelled transactions.
    """
    error = err.response.get("Error", {})
    code = error.get("Code")
    if code == "ConditionalCheckFailedException":
        return True
    if code == "TransactionCanceledException":
        reasons = err.response.get("CancellationReasons") or []
        if not reasons:
            return "ConditionalCheckFailed" in error.get("Message", "")
        return any(r.get("Code") == "ConditionalCheckFailed" for r in reasons)
    return False
