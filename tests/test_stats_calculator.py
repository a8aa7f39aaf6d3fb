"""
Tests for trailing-window statistics.
"""

from datetime import date

from pearl.stats_calculator import NO_DATA_LABEL, calculate_summary


class TestCalculateSummary:
    """Tests for the calculate_summary function."""

    TODAY = date(2024, 6, 30)

    def test_empty_input(self):
        summary = calculate_summary({}, today=self.TODAY)

        assert summary.total_count == 0
        assert summary.active_day_count == 0
        assert summary.busiest_date_label == NO_DATA_LABEL
        assert summary.busiest_date_label != ""

    def test_window_bounds_are_inclusive(self):
        counts = {
            date(2023, 6, 30): 50,  # one day before the window
            date(2023, 7, 1): 2,  # first day of the window
            date(2024, 6, 30): 4,  # today
            date(2024, 7, 1): 9,  # tomorrow
        }
        summary = calculate_summary(counts, today=self.TODAY)

        assert summary.total_count == 6
        assert summary.active_day_count == 2
        assert summary.busiest_date_label == "30 Jun 2024"

    def test_custom_window(self):
        counts = {
            date(2024, 6, 20): 10,
            date(2024, 6, 23): 1,
            date(2024, 6, 29): 2,
        }
        summary = calculate_summary(counts, today=self.TODAY, window_days=7)

        assert summary.total_count == 3
        assert summary.active_day_count == 2
        assert summary.busiest_date_label == "29 Jun 2024"

    def test_ties_keep_earliest_day(self):
        # Insertion order is deliberately not chronological
        counts = {
            date(2024, 2, 1): 5,
            date(2024, 1, 1): 5,
            date(2024, 3, 1): 3,
        }
        summary = calculate_summary(counts, today=self.TODAY)

        assert summary.busiest_date_label == "01 Jan 2024"

    def test_present_zero_count_day_is_active(self):
        counts = {
            date(2024, 6, 1): 0,
            date(2024, 6, 2): 3,
        }
        summary = calculate_summary(counts, today=self.TODAY)

        assert summary.active_day_count == 2
        assert summary.total_count == 3

    def test_only_zero_counts_has_no_busiest_day(self):
        summary = calculate_summary({date(2024, 6, 1): 0}, today=self.TODAY)

        assert summary.active_day_count == 1
        assert summary.total_count == 0
        assert summary.busiest_date_label == NO_DATA_LABEL

    def test_total_matches_windowed_sum(self):
        counts = {date(2023, 1, 1 + i): i for i in range(28)}
        counts.update({date(2024, 1, 1 + i): i * 2 for i in range(28)})
        window_start = date(2023, 7, 1)

        summary = calculate_summary(counts, today=self.TODAY)

        expected = sum(c for d, c in counts.items() if window_start <= d <= self.TODAY)
        assert summary.total_count == expected
