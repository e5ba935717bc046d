from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence, Union
from zoneinfo import ZoneInfo

import httpx

from timespent.analytics.client import AnalyticsClient
from timespent.analytics.schema import MISSING_TEXT, MISSING_TIMESPENT, ClassTimespentResponse
from timespent.config import ConfigError, DateRange, Settings, ensure_directories, load_settings
from timespent.reports.workbook import ClassTimespentWorkbook, OutputRow

logger = logging.getLogger("class_timespent")

Clock = Callable[[], datetime]


def configure_logging() -> None:
    ensure_directories()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=[
            logging.FileHandler("logs/app.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def format_timestamp(moment: datetime) -> str:
    """US locale rendering, e.g. ``8/16/2025, 3:04:05 PM``."""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{moment.month}/{moment.day}/{moment.year}, {hour}:{moment:%M:%S} {meridiem}"


def timezone_clock(report_timezone: str) -> Clock:
    zone = ZoneInfo(report_timezone)
    return lambda: datetime.now(zone)


@dataclass(frozen=True)
class ClassFetchSuccess:
    class_id: str
    url: str
    response: ClassTimespentResponse
    timestamp: str


@dataclass(frozen=True)
class ClassFetchFailure:
    class_id: str
    url: str
    error: str
    timestamp: str
    status_code: int | str = MISSING_TEXT


ClassOutcome = Union[ClassFetchSuccess, ClassFetchFailure]


@dataclass(frozen=True)
class RunSummary:
    timestamp: str
    total_requests: int
    successful_requests: int
    failed_requests: int

    def to_dict(self) -> dict[str, int | str]:
        return {
            "timestamp": self.timestamp,
            "totalRequests": self.total_requests,
            "successfulRequests": self.successful_requests,
            "failedRequests": self.failed_requests,
        }


def format_summary(summary: RunSummary) -> str:
    return json.dumps(summary.to_dict(), indent=2)


class ClassTimespentJob:
    def __init__(
        self,
        client: AnalyticsClient,
        class_ids: Sequence[str],
        date_range: DateRange,
        clock: Clock,
    ) -> None:
        self.client = client
        self.class_ids = list(class_ids)
        self.date_range = date_range
        self.clock = clock

    def request_params(self, class_id: str) -> dict[str, str]:
        return {
            "classId": class_id,
            "to": self.date_range.date_to.isoformat(),
            "from": self.date_range.date_from.isoformat(),
        }

    def fetch_class(self, class_id: str) -> ClassOutcome:
        params = self.request_params(class_id)
        url = self.client.build_url(params)
        try:
            payload = self.client.get_json(params)
        except httpx.HTTPStatusError as exc:
            return ClassFetchFailure(
                class_id=class_id,
                url=url,
                error=str(exc),
                timestamp=format_timestamp(self.clock()),
                status_code=exc.response.status_code,
            )
        except (httpx.HTTPError, ValueError) as exc:
            return ClassFetchFailure(
                class_id=class_id,
                url=url,
                error=str(exc) or exc.__class__.__name__,
                timestamp=format_timestamp(self.clock()),
            )
        return ClassFetchSuccess(
            class_id=class_id,
            url=url,
            response=ClassTimespentResponse.from_payload(payload),
            timestamp=format_timestamp(self.clock()),
        )

    def collect(self) -> list[ClassOutcome]:
        outcomes: list[ClassOutcome] = []
        for class_id in self.class_ids:
            outcome = self.fetch_class(class_id)
            if isinstance(outcome, ClassFetchFailure):
                logger.warning(
                    "Request failed for classId %s: %s",
                    class_id,
                    json.dumps(
                        {
                            "timestamp": outcome.timestamp,
                            "classId": outcome.class_id,
                            "requestUrl": outcome.url,
                            "status": "Error",
                            "error": outcome.error,
                            "statusCode": outcome.status_code,
                        }
                    ),
                )
            outcomes.append(outcome)
        return outcomes

    def summarize(self, outcomes: Sequence[ClassOutcome]) -> RunSummary:
        successful = sum(1 for outcome in outcomes if isinstance(outcome, ClassFetchSuccess))
        return RunSummary(
            timestamp=format_timestamp(self.clock()),
            total_requests=len(outcomes),
            successful_requests=successful,
            failed_requests=len(outcomes) - successful,
        )


def rows_for_outcome(outcome: ClassOutcome) -> list[OutputRow]:
    if isinstance(outcome, ClassFetchFailure):
        return []

    members = outcome.response.members
    if members is None:
        return [
            OutputRow(
                class_id=outcome.class_id,
                member_id=MISSING_TEXT,
                first_name=MISSING_TEXT,
                last_name=MISSING_TEXT,
                total_assessment_timespent=MISSING_TIMESPENT,
                timestamp=outcome.timestamp,
            )
        ]

    return [
        OutputRow(
            class_id=outcome.class_id,
            member_id=member.member_id,
            first_name=member.display_first_name,
            last_name=member.display_last_name,
            total_assessment_timespent=member.timespent,
            timestamp=outcome.timestamp,
        )
        for member in members
    ]


def export(
    settings: Settings,
    *,
    transport: httpx.BaseTransport | None = None,
    clock: Clock | None = None,
    workbook: ClassTimespentWorkbook | None = None,
) -> RunSummary:
    client = AnalyticsClient(
        settings.api_url,
        settings.auth_token,
        timeout=settings.request_timeout,
        transport=transport,
    )
    workbook = workbook if workbook is not None else ClassTimespentWorkbook()
    job = ClassTimespentJob(
        client,
        settings.class_ids,
        settings.date_range,
        clock or timezone_clock(settings.report_timezone),
    )

    try:
        outcomes = job.collect()
    finally:
        client.close()

    for outcome in outcomes:
        for row in rows_for_outcome(outcome):
            workbook.add_row(row)

    summary = job.summarize(outcomes)
    logger.info("Processing complete\n%s", format_summary(summary))

    saved_path = workbook.save(settings.output_file)
    logger.info("Excel file saved as %s", saved_path)
    return summary


def check_class(
    settings: Settings,
    class_id: str,
    *,
    transport: httpx.BaseTransport | None = None,
    clock: Clock | None = None,
) -> ClassOutcome:
    """Fetch a single class without writing the workbook."""
    client = AnalyticsClient(
        settings.api_url,
        settings.auth_token,
        timeout=settings.request_timeout,
        transport=transport,
    )
    job = ClassTimespentJob(
        client,
        [class_id],
        settings.date_range,
        clock or timezone_clock(settings.report_timezone),
    )
    try:
        return job.fetch_class(class_id)
    finally:
        client.close()


def main() -> None:
    configure_logging()
    settings = load_settings()
    logger.info(
        "Exporting timespent for %s classes from=%s to=%s",
        len(settings.class_ids),
        settings.date_range.date_from.isoformat(),
        settings.date_range.date_to.isoformat(),
    )
    export(settings)


def run() -> None:
    try:
        main()
    except (ConfigError, OSError) as exc:
        logger.error("Class timespent export failed: %s", exc)
        raise
    except Exception:
        logger.exception("Class timespent export failed unexpectedly")
        raise


if __name__ == "__main__":
    run()
