"""
Tests for the analytics package: profit, windows, summaries and equity curves
"""

import unittest
from datetime import date, timedelta
from decimal import Decimal

from braintrader.analytics import (
    JournalFilter,
    ReportPeriod,
    build_equity_curve,
    build_report,
    calculate_profit,
    filter_by_calendar,
    filter_by_period,
    max_drawdown,
    recorded_at_for,
    summarize,
    window_cutoff,
)
from braintrader.analytics.equity import format_point_label
from braintrader.analytics.windows import DAY_MS, start_of_week
from braintrader.schemas.journal import Direction

from tests.factories import record, record_on

NOW = 1_700_000_000_000


class TestProfitCalculator(unittest.TestCase):
    """Test cases for profit calculation"""

    def test_long_winner(self):
        self.assertEqual(calculate_profit(Direction.LONG, 100, 110, 1, 100), Decimal("1000.00"))

    def test_short_winner(self):
        self.assertEqual(calculate_profit(Direction.SHORT, 100, 90, 0.5, 100), Decimal("500.00"))

    def test_long_loser(self):
        self.assertEqual(calculate_profit(Direction.LONG, 100, 90, 2, 100), Decimal("-2000.00"))

    def test_default_multiplier(self):
        self.assertEqual(calculate_profit("SHORT", 1.1, 1.09, 1), Decimal("1.00"))

    def test_rounds_to_cents(self):
        # 0.00015 * 0.3 * 100 = 0.0045
        self.assertEqual(calculate_profit(Direction.LONG, "1.00000", "1.00015", "0.3"), Decimal("0.00"))
        self.assertEqual(calculate_profit(Direction.LONG, "1.0000", "1.0005", "0.3"), Decimal("0.02"))

    def test_decimal_input_avoids_float_drift(self):
        self.assertEqual(calculate_profit(Direction.LONG, 0.1, 0.3, 1, 1), Decimal("0.20"))

    def test_recorded_at_is_utc_midnight(self):
        self.assertEqual(recorded_at_for(date(1970, 1, 2)), DAY_MS)
        self.assertEqual(recorded_at_for(date(2024, 3, 1)), 1709251200000)


class TestWindows(unittest.TestCase):
    """Test cases for rolling and calendar windows"""

    def test_cutoffs(self):
        self.assertEqual(window_cutoff(ReportPeriod.ALL, NOW), 0)
        self.assertEqual(window_cutoff(ReportPeriod.DAILY, NOW), NOW - DAY_MS)
        self.assertEqual(window_cutoff("weekly", NOW), NOW - 7 * DAY_MS)
        self.assertEqual(window_cutoff(ReportPeriod.MONTHLY, NOW), NOW - 30 * DAY_MS)
        self.assertEqual(window_cutoff(ReportPeriod.THREE_MONTH, NOW), NOW - 90 * DAY_MS)
        self.assertEqual(window_cutoff(ReportPeriod.SIX_MONTH, NOW), NOW - 180 * DAY_MS)
        self.assertEqual(window_cutoff(ReportPeriod.YEAR, NOW), NOW - 365 * DAY_MS)

    def test_ten_days_ago(self):
        rec = record(10, recorded_at=NOW - 10 * DAY_MS)
        included = {ReportPeriod.MONTHLY, ReportPeriod.THREE_MONTH, ReportPeriod.SIX_MONTH,
                    ReportPeriod.YEAR, ReportPeriod.ALL}
        for period in ReportPeriod:
            with self.subTest(period=period):
                self.assertEqual(filter_by_period([rec], period, NOW) == [rec], period in included)

    def test_cutoff_is_inclusive(self):
        rec = record(1, recorded_at=NOW - 7 * DAY_MS)
        self.assertEqual(filter_by_period([rec], ReportPeriod.WEEKLY, NOW), [rec])

    def test_unknown_period_rejected(self):
        with self.assertRaises(ValueError):
            window_cutoff("fortnight", NOW)

    def test_start_of_week_is_sunday(self):
        # 2024-06-12 is a Wednesday
        self.assertEqual(start_of_week(date(2024, 6, 12)), date(2024, 6, 9))
        self.assertEqual(start_of_week(date(2024, 6, 9)), date(2024, 6, 9))
        self.assertEqual(start_of_week(date(2024, 6, 15)), date(2024, 6, 9))

    def test_calendar_filters(self):
        today = date(2024, 6, 12)
        records = [
            record_on(today),
            record_on(date(2024, 6, 10)),
            record_on(date(2024, 6, 2)),
            record_on(date(2024, 5, 31)),
            record_on(date(2023, 6, 12)),
        ]
        self.assertEqual(len(filter_by_calendar(records, JournalFilter.ALL, today)), 5)
        self.assertEqual(filter_by_calendar(records, JournalFilter.TODAY, today), records[:1])
        self.assertEqual(filter_by_calendar(records, JournalFilter.THIS_WEEK, today), records[:2])
        self.assertEqual(filter_by_calendar(records, "this-month", today), records[:3])

    def test_rolling_and_calendar_windows_disagree(self):
        # Monday: the calendar week began yesterday, the rolling week six days earlier
        today = date(2024, 6, 10)
        now = recorded_at_for(today) + 12 * 60 * 60 * 1000
        last_thursday = record_on(date(2024, 6, 6))

        self.assertEqual(filter_by_period([last_thursday], ReportPeriod.WEEKLY, now), [last_thursday])
        self.assertEqual(filter_by_calendar([last_thursday], JournalFilter.THIS_WEEK, today), [])


class TestSummary(unittest.TestCase):
    """Test cases for summary statistics"""

    def test_empty(self):
        summary = summarize([])
        self.assertEqual(summary.total_count, 0)
        self.assertEqual(summary.win_count, 0)
        self.assertEqual(summary.win_rate, 0)
        self.assertEqual(summary.net_profit, 0)
        self.assertEqual(summary.discipline_rate, 0)
        self.assertIsNone(summary.profit_factor)

    def test_mixed(self):
        records = [
            record(200, was_disciplined=True, followed_rules=True, confidence_rating=5),
            record(-50, was_disciplined=False, followed_rules=True, confidence_rating=2),
            record(100, was_disciplined=True, followed_rules=False, confidence_rating=3),
            record(0, was_disciplined=True, followed_rules=True, confidence_rating=4),
        ]
        summary = summarize(records)
        self.assertEqual(summary.total_count, 4)
        self.assertEqual(summary.win_count, 2)
        self.assertEqual(summary.loss_count, 1)
        self.assertEqual(summary.win_rate, 50.0)
        self.assertEqual(summary.net_profit, 250.0)
        self.assertEqual(summary.discipline_rate, 75.0)
        self.assertEqual(summary.rules_followed_rate, 75.0)
        self.assertEqual(summary.profit_factor, 6.0)
        self.assertEqual(summary.avg_win, 150.0)
        self.assertEqual(summary.avg_loss, 50.0)
        self.assertEqual(summary.average_confidence, 3.5)

    def test_rates_within_bounds(self):
        records = [record(p, was_disciplined=p > 0) for p in (5, -3, 8, -1, 2)]
        summary = summarize(records)
        self.assertTrue(0 <= summary.win_rate <= 100)
        self.assertTrue(0 <= summary.discipline_rate <= 100)

    def test_profit_factor_without_losses(self):
        summary = summarize([record(100), record(200)])
        self.assertEqual(summary.profit_factor, 300.0)

    def test_only_losses(self):
        summary = summarize([record(-10), record(-30)])
        self.assertEqual(summary.profit_factor, 0.0)
        self.assertEqual(summary.avg_win, 0.0)
        self.assertEqual(summary.avg_loss, 20.0)

    def test_cent_sums_are_exact(self):
        summary = summarize([record(0.1), record(0.2)])
        self.assertEqual(summary.net_profit, 0.3)


class TestEquityCurve(unittest.TestCase):
    """Test cases for equity curve and report assembly"""

    def setUp(self):
        self.records = [
            record(-40, recorded_at=3 * DAY_MS, instrument="GBPUSD"),
            record(100, recorded_at=1 * DAY_MS, instrument="XAUUSD"),
            record(-80, recorded_at=2 * DAY_MS, instrument="EURUSD"),
            record(50, recorded_at=4 * DAY_MS, instrument="USDJPY"),
        ]

    def test_chronological_and_cumulative(self):
        curve = build_equity_curve(self.records)
        self.assertEqual([p.recorded_at for p in curve], [DAY_MS, 2 * DAY_MS, 3 * DAY_MS, 4 * DAY_MS])
        self.assertEqual([p.equity for p in curve], [100.0, 20.0, -20.0, 30.0])
        for previous, point in zip(curve, curve[1:]):
            self.assertAlmostEqual(point.equity, previous.equity + point.point_profit)

    def test_final_equity_matches_net_profit(self):
        curve = build_equity_curve(self.records)
        self.assertEqual(curve[-1].equity, summarize(self.records).net_profit)

    def test_equal_timestamps_keep_input_order(self):
        first = record(1, recorded_at=DAY_MS, instrument="FIRST")
        second = record(2, recorded_at=DAY_MS, instrument="SECOND")
        curve = build_equity_curve([first, second])
        self.assertEqual([p.instrument for p in curve], ["FIRST", "SECOND"])

    def test_label(self):
        label = format_point_label(recorded_at_for(date(2024, 6, 12)) + 12 * 60 * 60 * 1000)
        self.assertEqual(label, "Jun 12")

    def test_max_drawdown(self):
        curve = build_equity_curve(self.records)
        self.assertEqual(max_drawdown(curve), -120.0)
        self.assertEqual(max_drawdown([]), 0.0)

    def test_drawdown_from_first_losing_trade(self):
        curve = build_equity_curve([record(-25, recorded_at=DAY_MS)])
        self.assertEqual(max_drawdown(curve), -25.0)

    def test_build_report_applies_window(self):
        now = 10 * DAY_MS
        records = [record(10, recorded_at=9 * DAY_MS), record(20, recorded_at=DAY_MS)]
        report = build_report(records, ReportPeriod.WEEKLY, now)
        self.assertEqual(report.period, "weekly")
        self.assertEqual(report.cutoff, 3 * DAY_MS)
        self.assertEqual(report.summary.total_count, 1)
        self.assertEqual(len(report.equity_curve), 1)

        report = build_report(records, ReportPeriod.ALL, now)
        self.assertEqual(report.summary.net_profit, 30.0)
        self.assertEqual(report.equity_curve[-1].equity, 30.0)


if __name__ == "__main__":
    unittest.main()
