"""
Unit tests for applications helper functions.
"""

from datetime import UTC, datetime, timedelta, timezone

from app.modules.applications.helpers import (
    STATUS_LABELS,
    detect_review_flags,
    monthly_trends,
    trend_months,
    trend_window_start,
)
from app.modules.applications.models import ApplicationStatus


class TestStatusLabels:
    def test_every_status_has_a_label(self):
        assert set(STATUS_LABELS) == set(ApplicationStatus)

    def test_under_review_label(self):
        assert STATUS_LABELS[ApplicationStatus.UNDER_REVIEW] == "Under Review"


class TestDetectReviewFlags:
    """Tests for advisory review flags."""

    def test_short_cover_letter_flagged(self, make_application):
        application = make_application(cover_letter="Please hire me.")
        assert detect_review_flags(application) == ["Cover letter too short"]

    def test_missing_cover_letter_not_flagged(self, make_application):
        assert detect_review_flags(make_application(cover_letter=None)) == []

    def test_long_cover_letter_not_flagged(self, make_application):
        application = make_application(cover_letter="x" * 50)
        assert detect_review_flags(application) == []


class TestMonthlyTrends:
    """Tests for monthly trend bucketing."""

    def test_window_wraps_year(self):
        now = datetime(2026, 2, 10, tzinfo=UTC)
        assert trend_months(now) == [
            "2025-09",
            "2025-10",
            "2025-11",
            "2025-12",
            "2026-01",
            "2026-02",
        ]

    def test_window_start(self):
        now = datetime(2026, 2, 10, tzinfo=UTC)
        assert trend_window_start(now) == datetime(2025, 9, 1, tzinfo=UTC)

    def test_counts_and_zero_months(self):
        now = datetime(2026, 2, 10, tzinfo=UTC)
        applied = [
            datetime(2026, 2, 1, tzinfo=UTC),
            datetime(2026, 2, 9, tzinfo=UTC),
            datetime(2025, 11, 30, tzinfo=UTC),
            datetime(2024, 1, 1, tzinfo=UTC),  # outside the window
        ]

        trends = monthly_trends(applied, now)

        assert trends[-1] == {"month": "2026-02", "count": 2}
        assert {"month": "2025-11", "count": 1} in trends
        assert sum(item["count"] for item in trends) == 3

    def test_offsets_are_bucketed_in_utc(self):
        now = datetime(2026, 2, 10, tzinfo=UTC)
        # 2026-02-01 01:00 at UTC+3 is still January in UTC
        applied = [datetime(2026, 2, 1, 1, 0, tzinfo=timezone(timedelta(hours=3)))]

        trends = monthly_trends(applied, now)

        assert {"month": "2026-01", "count": 1} in trends
