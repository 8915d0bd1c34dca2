"""Main Lambda handler for the episode release notifier."""

import json
import os
from datetime import UTC, datetime
from typing import Any

import boto3

from .composer import compose_notification
from .config import DEFAULT_REGION, NotifierConfig, load_config
from .logging_config import (
    create_execution_logger,
    set_log_level,
    setup_structured_logging,
)
from .models import NotificationMessage
from .notifier import SnsNotifier
from .rss import FeedFetcher
from .selector import compute_cutoff, select_entries

METRICS_NAMESPACE = "Episode-Release-Notifier"

# Setup structured logging
setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Entry point for the scheduled EventBridge rule.

    Args:
        event: Scheduled event; only its id and time are logged
        context: Lambda context object

    Returns:
        Response dictionary with status and metrics

    Raises:
        Exception: Any configuration, feed or publish failure, after logging,
            so the invocation is reported as failed
    """
    execution_id = f"lambda_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)

    event = event or {}
    main_logger.log_execution_start(
        event_id=event.get("id"),
        event_time=event.get("time"),
        lambda_request_id=getattr(context, "aws_request_id", "unknown"),
        lambda_function_name=getattr(context, "function_name", "unknown"),
    )

    metrics = {
        "entries_found": 0,
        "entries_selected": 0,
        "messages_sent": 0,
        "errors": [],
    }
    region = DEFAULT_REGION

    try:
        config = load_config(os.environ)
        region = config.region
        set_log_level(config.log_level)
        main_logger.info(
            "Configuration initialized",
            policy=config.policy.value,
            feed_url=config.feed_url,
            aws_region=config.region,
        )

        fetcher = FeedFetcher(execution_id=execution_id)
        notifier = SnsNotifier(config.region, execution_id=execution_id)

        run_pipeline(
            config,
            fetcher,
            notifier,
            datetime.now(UTC),
            execution_id=execution_id,
            metrics=metrics,
        )
    except Exception as e:
        error_msg = f"Critical error in Lambda handler: {e}"
        main_logger.exception(error_msg, error=str(e))
        metrics["errors"].append(error_msg)
        send_cloudwatch_metrics(metrics, region, execution_id)
        main_logger.log_execution_end(success=False, metrics=metrics, error=error_msg)
        raise

    main_logger.log_metrics(metrics)
    send_cloudwatch_metrics(metrics, region, execution_id)
    main_logger.log_execution_end(success=True, metrics=metrics)

    return {
        "statusCode": 200,
        "body": json.dumps(
            {
                "message": "Episode release notifier execution completed",
                "execution_id": execution_id,
                "metrics": metrics,
            },
            ensure_ascii=False,
        ),
    }


def run_pipeline(
    config: NotifierConfig,
    fetcher: FeedFetcher,
    notifier: SnsNotifier,
    now: datetime,
    execution_id: str | None = None,
    metrics: dict[str, Any] | None = None,
) -> list[NotificationMessage]:
    """Fetch the feed, pick fresh entries and publish one message per pick.

    Publishing is sequential; the first failure propagates and the
    remaining messages are not sent.

    Returns:
        The messages that were published
    """
    logger = create_execution_logger("main", execution_id)
    selector_logger = create_execution_logger("selector", execution_id)
    if metrics is None:
        metrics = {"entries_found": 0, "entries_selected": 0, "messages_sent": 0}

    entries = fetcher.fetch(config.feed_url)
    metrics["entries_found"] = len(entries)
    logger.info(f"Total entries found: {len(entries)}", total_entries=len(entries))

    cutoff = compute_cutoff(now, config.lookback_hours)
    selected = select_entries(config.policy, entries, cutoff, selector_logger)
    metrics["entries_selected"] = len(selected)

    if not selected:
        logger.info("Nothing to notify", cutoff=cutoff.isoformat())
        return []

    sent = []
    for entry in selected:
        message = compose_notification(entry)
        notifier.publish(config.topic_arn, message.subject, message.body)
        metrics["messages_sent"] += 1
        logger.log_entry_processing(entry.display_title, "published")
        sent.append(message)

    return sent


def send_cloudwatch_metrics(
    metrics: dict[str, Any], aws_region: str, execution_id: str
) -> None:
    """
    Send custom metrics to CloudWatch.

    Failures are logged and never raised.

    Args:
        metrics: Dictionary containing execution metrics
        aws_region: AWS region for CloudWatch client
        execution_id: Execution ID for logging context
    """
    metrics_logger = create_execution_logger("cloudwatch_metrics", execution_id)

    try:
        metrics_logger.info("Sending metrics to CloudWatch", metrics=metrics)
        cloudwatch = boto3.client("cloudwatch", region_name=aws_region)

        total_errors = len(metrics.get("errors", []))
        execution_success = total_errors == 0
        status_dimension = [
            {"Name": "Status", "Value": "Success" if execution_success else "Failure"}
        ]

        metric_data = [
            {
                "MetricName": "EntriesFound",
                "Value": metrics["entries_found"],
                "Unit": "Count",
            },
            {
                "MetricName": "EntriesSelected",
                "Value": metrics["entries_selected"],
                "Unit": "Count",
            },
            {
                "MetricName": "MessagesSent",
                "Value": metrics["messages_sent"],
                "Unit": "Count",
            },
            {
                "MetricName": "Errors",
                "Value": total_errors,
                "Unit": "Count",
            },
            {
                "MetricName": "ExecutionSuccess",
                "Value": 1 if execution_success else 0,
                "Unit": "Count",
                "Dimensions": status_dimension,
            },
            {
                "MetricName": "ExecutionFailure",
                "Value": 0 if execution_success else 1,
                "Unit": "Count",
                "Dimensions": status_dimension,
            },
        ]

        cloudwatch.put_metric_data(Namespace=METRICS_NAMESPACE, MetricData=metric_data)

        metrics_logger.info(
            "Successfully sent metrics to CloudWatch",
            metrics_sent=len(metric_data),
            namespace=METRICS_NAMESPACE,
            execution_success=execution_success,
        )

    except Exception as e:
        metrics_logger.error(f"Failed to send CloudWatch metrics: {e}", error=str(e))
        # Don't raise - metrics failure shouldn't break the main flow
