"""AWS SES alert channel implementing NotificationProtocol.

Alerts are plain-text emails. Delivery failures are returned as
``Failure(NotificationError)``; the error logger only logs them.
"""

from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from command_gateway.core.enums import ErrorCode
from command_gateway.core.result import Failure, Result, Success
from command_gateway.domain.errors import NotificationError
from command_gateway.domain.protocols import LoggerProtocol


class SESNotifier:
    """Sends operator alerts through AWS SES.

    Attributes:
        _client: Boto3 SES client.
        _source: ``Name <address>`` sender.
    """

    def __init__(
        self,
        *,
        ses_client: Any,
        from_email: str,
        from_name: str,
        logger: LoggerProtocol,
    ) -> None:
        """Initialize the notifier.

        Args:
            ses_client: Boto3 SES client (``boto3.client("ses", ...)``).
            from_email: Verified sender address.
            from_name: Sender display name.
            logger: Structured logger.
        """
        self._client = ses_client
        self._source = f"{from_name} <{from_email}>"
        self._logger = logger

    def send(self, to: str, subject: str, body: str) -> Result[None, NotificationError]:
        """Send one plain-text alert.

        Returns:
            Success(None), or Failure(NotificationError) when SES refused or
            could not be reached.
        """
        try:
            response = self._client.send_email(
                Source=self._source,
                Destination={"ToAddresses": [to]},
                Message={
                    "Subject": {"Charset": "UTF-8", "Data": subject},
                    "Body": {"Text": {"Charset": "UTF-8", "Data": body}},
                },
            )
        except ClientError as e:
            error = e.response.get("Error", {})
            return Failure(
                error=NotificationError(
                    code=ErrorCode.NOTIFICATION_FAILED,
                    message="AWS SES rejected the alert",
                    details={
                        "to": to,
                        "error_code": error.get("Code", "unknown"),
                        "error": error.get("Message", str(e)),
                    },
                )
            )
        except BotoCoreError as e:
            return Failure(
                error=NotificationError(
                    code=ErrorCode.NOTIFICATION_FAILED,
                    message="AWS SES unreachable",
                    details={"to": to, "error": str(e)},
                )
            )

        self._logger.info(
            "Operator alert sent",
            to=to,
            message_id=response.get("MessageId", "unknown"),
        )
        return Success(value=None)
