"""Run one notifier invocation locally: python -m episode_notifier."""

import sys
import uuid
from datetime import UTC, datetime

from .lambda_handler import lambda_handler
from .logging_config import create_execution_logger


def main() -> int:
    event = {
        "id": str(uuid.uuid4()),
        "detail-type": "Scheduled Event",
        "source": "local",
        "time": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
    }
    try:
        lambda_handler(event, None)
    except Exception as e:
        create_execution_logger("main").error(f"Unhandled error: {e}", error=str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
