# backend/consult_bridge/services/sms_service.py

from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from consult_bridge.core.logging import get_logger
from consult_bridge.services.collaborators import Result

logger = get_logger(__name__)


class SnsSmsSender:
    """Sends transactional SMS through AWS SNS."""

    def __init__(
        self,
        region: str = "us-west-2",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        client: Any = None,
    ):
        self.client = client or boto3.client(
            "sns",
            region_name=region,
            aws_access_key_id=access_key_id or None,
            aws_secret_access_key=secret_access_key or None,
        )

    def send(self, phone: str, body: str) -> Result:
        try:
            response = self.client.publish(
                PhoneNumber=phone,
                Message=body,
                MessageAttributes={
                    "AWS.SNS.SMS.SMSType": {"DataType": "String", "StringValue": "Transactional"},
                },
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"SMS: Failed to send to {phone}: {e}")
            return Result(ok=False, detail=str(e))

        message_id = response.get("MessageId", "")
        logger.info(f"SMS: Sent to {phone} (message id {message_id}).")
        return Result(ok=True, detail=message_id)
