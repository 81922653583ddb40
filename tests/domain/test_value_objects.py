import pytest
from datetime import time
from domain.exceptions import EmptyDaySetError, InvalidIntervalError, InvalidWeekdayError
from domain.value_objects.day_set import DaySet, Weekday
from domain.value_objects.time_interval import TimeInterval


class TestTimeInterval:
    """Tests unitaires pour le Value Object TimeInterval"""

    def test_interval_creation(self):
        interval = TimeInterval(480, 540)

        assert interval.start == 480
        assert interval.end == 540
        assert interval.duration_minutes == 60
        assert interval.start_time == time(8, 0)
        assert interval.end_time == time(9, 0)

    def test_from_strings(self):
        interval = TimeInterval.from_strings("13:00", "14:30")

        assert interval == TimeInterval(780, 870)
        assert interval.to_display_format() == "13:00-14:30"

    def test_from_strings_without_leading_zero(self):
        assert TimeInterval.from_strings("8:00", "9:15") == TimeInterval(480, 555)

    @pytest.mark.parametrize("start,end", [(540, 540), (600, 540), (-1, 60), (0, 1440)])
    def test_invalid_interval_rejected(self, start, end):
        """Créneaux vides, inversés ou hors journée"""
        with pytest.raises(InvalidIntervalError):
            TimeInterval(start, end)

    def test_invalid_time_string(self):
        with pytest.raises(InvalidIntervalError):
            TimeInterval.from_strings("invalid", "09:00")
        with pytest.raises(InvalidIntervalError):
            TimeInterval.from_strings("25:00", "26:00")

    @pytest.mark.parametrize("value", ["08:00:59", "08:00+02:00", "08:00Z", "0800"])
    def test_only_hours_and_minutes_accepted(self, value):
        with pytest.raises(InvalidIntervalError):
            TimeInterval.from_strings(value, "09:00")

    def test_last_minute_of_day_allowed(self):
        assert TimeInterval(0, 1439).duration_minutes == 1439

    def test_overlap_partial(self):
        a = TimeInterval.from_strings("08:00", "09:00")
        b = TimeInterval.from_strings("08:30", "09:30")

        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_touching_intervals_do_not_overlap(self):
        a = TimeInterval.from_strings("08:00", "09:00")
        b = TimeInterval.from_strings("09:00", "10:00")

        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_contained_interval_overlaps(self):
        outer = TimeInterval.from_strings("08:00", "12:00")
        inner = TimeInterval.from_strings("09:00", "10:00")

        assert outer.overlaps(inner)
        assert inner.overlaps(outer)

    def test_overlap_is_symmetric(self):
        intervals = [
            TimeInterval(start, end)
            for start in range(0, 300, 45)
            for end in range(start + 15, 360, 60)
        ]
        for a in intervals:
            for b in intervals:
                assert a.overlaps(b) == b.overlaps(a)


class TestDaySet:
    """Tests unitaires pour le Value Object DaySet"""

    def test_creation_from_names(self):
        days = DaySet.of(["Wednesday", "monday"])

        assert Weekday.MONDAY in days
        assert "Wednesday" in days
        assert "Friday" not in days
        assert len(days) == 2

    def test_empty_day_set_rejected(self):
        with pytest.raises(EmptyDaySetError):
            DaySet.of([])

    def test_unknown_day_rejected(self):
        with pytest.raises(InvalidWeekdayError):
            DaySet.of(["Lundi"])

    def test_direct_construction_normalizes_names(self):
        """Le constructeur accepte noms, listes et chaînes comme DaySet.of"""
        assert DaySet(frozenset({"Monday"})) == DaySet.of(["Monday"])
        assert DaySet(["friday", "Monday"]).days == frozenset({Weekday.MONDAY, Weekday.FRIDAY})
        assert DaySet("Tuesday") == DaySet.of([Weekday.TUESDAY])

    def test_direct_construction_rejects_unknown_day(self):
        with pytest.raises(InvalidWeekdayError):
            DaySet(frozenset({"Funday"}))
        with pytest.raises(InvalidWeekdayError):
            DaySet(42)

    def test_duplicates_collapse(self):
        assert DaySet.of(["Monday", "Monday", Weekday.MONDAY]) == DaySet.of(["Monday"])

    def test_equality_ignores_order(self):
        assert DaySet.of(["Friday", "Monday"]) == DaySet.of(["Monday", "Friday"])

    def test_ordered_sequence_is_monday_first(self):
        days = DaySet.of(["Sunday", "Wednesday", "Monday"])

        assert days.to_ordered_sequence() == (Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.SUNDAY)
        assert list(days) == [Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.SUNDAY]
        assert days.names() == ["Monday", "Wednesday", "Sunday"]

    def test_intersects(self):
        mon_wed = DaySet.of(["Monday", "Wednesday"])
        wed_fri = DaySet.of(["Wednesday", "Friday"])
        tue_thu = DaySet.of(["Tuesday", "Thursday"])

        assert mon_wed.intersects(wed_fri)
        assert not mon_wed.intersects(tue_thu)
        assert mon_wed.intersection(wed_fri) == (Weekday.WEDNESDAY,)

    def test_weekday_index(self):
        assert Weekday.MONDAY.index == 0
        assert Weekday.THURSDAY.index == 3
        assert Weekday.SUNDAY.index == 6
