"""Notification webhook client with exponential backoff retry logic"""

import httpx
import asyncio
import logging
from typing import Dict, Any
from fastapi import BackgroundTasks
from payoff_planner.config import settings
from payoff_planner.domain.models import ReportCreatedEvent
from payoff_planner.infrastructure.observability.metrics import (
    notification_latency_histogram,
    notification_failure_counter,
)


def report_created_payload(event: ReportCreatedEvent) -> Dict[str, Any]:
    return {
        "event": "REPORT_CREATED",
        "report_id": str(event.report_id),
        "user_id": event.user_id,
        "total_debt": str(event.total_debt),
        "created_at": event.created_at.isoformat(),
    }


class NotificationClient:
    """Client for sending events to the notification service"""

    def __init__(
        self,
        webhook_url: str | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url or settings.notification_webhook_url
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.webhook_backoff_base
        self.transport = transport

    async def send_report_created(self, payload: Dict[str, Any]) -> None:
        """
        Send a report-created event with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s, 16s (base^attempt)
        - Retries on 5xx errors and network failures
        - Tracks latency histogram and failure counter

        Args:
            payload: Event data to send to the notification service
        """
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport) as client:
            while attempt < self.max_retries:
                try:
                    with notification_latency_histogram.time():
                        response = await client.post(
                            self.webhook_url,
                            json=payload,
                            timeout=settings.http_timeout_seconds,
                        )
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError):
                    attempt += 1
                    notification_failure_counter.inc()

                    if attempt >= self.max_retries:
                        # Final failure after all retries
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)


class WebhookEventSink:
    """Event sink that delivers after the response via FastAPI background tasks"""

    def __init__(self, background_tasks: BackgroundTasks, client: NotificationClient):
        self.background_tasks = background_tasks
        self.client = client

    def publish(self, event: ReportCreatedEvent) -> None:
        self.background_tasks.add_task(self._deliver, report_created_payload(event))

    async def _deliver(self, payload: Dict[str, Any]) -> None:
        # Best-effort: the report already exists, a lost notification is only logged
        try:
            await self.client.send_report_created(payload)
        except httpx.HTTPError as e:
            logging.error(
                f"Notification delivery failed: {e}",
                extra={"report_id": payload["report_id"], "user_id": payload["user_id"]},
            )
