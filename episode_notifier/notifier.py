"""Amazon SNS publisher for the episode release notifier."""

from typing import Any

import boto3
from botocore.exceptions import ClientError

from .logging_config import create_execution_logger


class SnsNotifier:
    """Publishes notification messages to an SNS topic."""

    def __init__(self, region: str, execution_id: str | None = None):
        """Initialize the SNS client.

        Args:
            region: AWS region hosting the topic
            execution_id: Execution ID for logging context
        """
        self.region = region
        self.logger = create_execution_logger("notifier", execution_id)
        self.client = boto3.client("sns", region_name=region)

        self.logger.info("SnsNotifier initialized", aws_region=region)

    def publish(self, topic_arn: str, subject: str, message: str) -> dict[str, Any]:
        """Publish a message to the topic.

        Args:
            topic_arn: Destination topic ARN
            subject: Subject line, used by email subscribers
            message: Plain text body

        Returns:
            The SNS Publish response

        Raises:
            ClientError: If SNS rejects the request
        """
        try:
            response = self.client.publish(
                TopicArn=topic_arn,
                Subject=subject,
                Message=message,
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            self.logger.error(
                f"SNS publish failed: {error_code}",
                topic_arn=topic_arn,
                subject=subject,
                error=str(e),
            )
            raise
        except Exception as e:
            self.logger.error(
                f"SNS publish failed: {type(e).__name__}",
                topic_arn=topic_arn,
                subject=subject,
                error=str(e),
            )
            raise

        self.logger.info(
            "SNS publish succeeded",
            topic_arn=topic_arn,
            subject=subject,
            message_id=response.get("MessageId"),
        )
        return response
