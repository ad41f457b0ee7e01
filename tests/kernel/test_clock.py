"""Tests for budget_kernel.domain.clock."""

from datetime import date, datetime, timedelta, timezone

from budget_kernel.domain.clock import DeterministicClock, SystemClock


class TestSystemClock:
    def test_now_is_utc(self):
        assert SystemClock().now().tzinfo is timezone.utc

    def test_today_is_utc_date(self):
        clock = SystemClock()
        assert clock.today() in {
            datetime.now(timezone.utc).date(),
            (datetime.now(timezone.utc) - timedelta(seconds=1)).date(),
        }


class TestDeterministicClock:
    def test_today_follows_utc_across_midnight(self):
        clock = DeterministicClock(datetime(2024, 1, 31, 23, 59, tzinfo=timezone.utc))
        assert clock.today() == date(2024, 1, 31)

        clock.advance(60)

        assert clock.today() == date(2024, 2, 1)

    def test_today_uses_the_timezone_now_carries(self):
        eastern = timezone(timedelta(hours=-5))
        clock = DeterministicClock(datetime(2024, 1, 31, 23, 30, tzinfo=eastern))

        assert clock.today() == date(2024, 1, 31)
        assert clock.now().astimezone(timezone.utc).date() == date(2024, 2, 1)

    def test_advance_days(self):
        clock = DeterministicClock(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc))
        clock.advance_days(20)
        assert clock.today() == date(2024, 2, 4)
