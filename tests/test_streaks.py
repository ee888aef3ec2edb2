from datetime import date, timedelta

from apps.habits.domain.streaks import (
    NEVER_COMPLETED_DAYS, current_streak, days_since_last_completed, longest_cold_streak,
    longest_streak, rolling_average, rolling_stats, streak_badge, summarize,
)

TODAY = date(2026, 10, 16)


def days_ago(*offsets):
    return [TODAY - timedelta(days=n) for n in offsets]


def test_three_consecutive_days_ending_today():
    assert current_streak(days_ago(0, 1, 2), TODAY) == 3


def test_today_not_done_keeps_yesterdays_streak():
    assert current_streak(days_ago(1, 2), TODAY) == 2


def test_gap_breaks_streak():
    assert current_streak(days_ago(2, 3), TODAY) == 0


def test_last_completion_five_days_ago():
    summary = summarize(days_ago(5), TODAY)
    assert summary.current_streak == 0
    assert summary.cold_days == 4


def test_never_completed():
    summary = summarize([], TODAY)
    assert summary.last_completed_date is None
    assert summary.cold_days == NEVER_COMPLETED_DAYS
    assert days_since_last_completed(None, TODAY) == NEVER_COMPLETED_DAYS


def test_completed_yesterday_has_no_cold_days():
    assert days_since_last_completed(TODAY - timedelta(days=1), TODAY) == 0
    assert days_since_last_completed(TODAY, TODAY) == 0


def test_longest_streak():
    assert longest_streak(days_ago(0, 1, 5, 6, 7, 8, 20)) == 4
    assert longest_streak([]) == 0


def test_longest_cold_streak_in_window():
    start = TODAY - timedelta(days=9)
    # wykonane 9 i 3 dni temu -> przerwa 5 dni (8..4) oraz 3 dni (2..0)
    assert longest_cold_streak(days_ago(9, 3), start, TODAY) == 5


def test_longest_cold_streak_whole_window_when_never_done():
    assert longest_cold_streak([], TODAY - timedelta(days=6), TODAY) == 7


def test_summarize_ignores_future_dates():
    summary = summarize(days_ago(0, -1, -2), TODAY)
    assert summary.current_streak == 1
    assert summary.last_completed_date == TODAY


def test_rolling_average_full_window():
    dates = days_ago(*range(0, 30, 2))  # 15 wykonań w 30 dni
    assert rolling_average(dates, 30, TODAY, 7) == 3.5
    stats = rolling_stats(dates, TODAY)
    assert stats.weekly_average == 3.5
    assert stats.monthly_average == 15.0


def test_rolling_average_clipped_to_tracking_start():
    # śledzone od 4 dni, wykonane wszystkie 4
    since = TODAY - timedelta(days=3)
    assert rolling_average(days_ago(0, 1, 2, 3), 30, TODAY, 7, tracked_since=since) == 7.0


def test_rolling_average_ignores_dates_outside_window():
    assert rolling_average(days_ago(40, 31), 30, TODAY, 7) == 0.0


def test_badge_rule():
    assert streak_badge(1, 0) == '\U0001F525'
    assert streak_badge(6, 0) == '\U0001F525' * 2
    assert streak_badge(11, 0) == '\U0001F525' * 3
    assert streak_badge(0, 3) and '\U0001F525' not in streak_badge(0, 3)
    assert streak_badge(0, 7) == streak_badge(0, 3) * 2
    assert streak_badge(0, 0) == ''
