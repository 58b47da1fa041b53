"""
Applications Shared Helpers

Display labels, advisory review flags and analytics bucketing used by the
service and the notification dispatcher.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from app.modules.applications.models import Application, ApplicationStatus

STATUS_LABELS: dict[ApplicationStatus, str] = {
    ApplicationStatus.PENDING: "Pending",
    ApplicationStatus.UNDER_REVIEW: "Under Review",
    ApplicationStatus.SHORTLISTED: "Shortlisted",
    ApplicationStatus.INTERVIEW: "Interview",
    ApplicationStatus.ACCEPTED: "Accepted",
    ApplicationStatus.REJECTED: "Rejected",
    ApplicationStatus.WITHDRAWN: "Withdrawn",
}

MIN_COVER_LETTER_LENGTH = 50
TREND_MONTHS = 6


def status_label(status: ApplicationStatus) -> str:
    return STATUS_LABELS[status]


def detect_review_flags(application: Application) -> list[str]:
    """
    Advisory signals shown to organizations next to an applicant.

    A missing cover letter is not flagged; a present but very short one is.
    Flags never affect status.
    """
    flags = []
    cover_letter = (application.cover_letter or "").strip()
    if cover_letter and len(cover_letter) < MIN_COVER_LETTER_LENGTH:
        flags.append("Cover letter too short")
    return flags


def trend_months(now: datetime, months: int = TREND_MONTHS) -> list[str]:
    """The last ``months`` calendar months as "YYYY-MM", oldest first, ending with ``now``."""
    keys = []
    year, month = now.year, now.month
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def trend_window_start(now: datetime, months: int = TREND_MONTHS) -> datetime:
    """First instant of the oldest month in the trend window."""
    first_key = trend_months(now, months)[0]
    year, month = (int(part) for part in first_key.split("-"))
    return datetime(year, month, 1, tzinfo=UTC)


def monthly_trends(
    applied_at: Iterable[datetime],
    now: datetime,
    months: int = TREND_MONTHS,
) -> list[dict[str, int | str]]:
    """
    Count applications per calendar month (UTC) over the trend window.

    Every month in the window is present, zero where nothing was submitted.
    Timestamps outside the window are ignored.
    """
    counts = dict.fromkeys(trend_months(now, months), 0)
    for timestamp in applied_at:
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(UTC)
        key = f"{timestamp.year:04d}-{timestamp.month:02d}"
        if key in counts:
            counts[key] += 1
    return [{"month": month, "count": count} for month, count in counts.items()]
