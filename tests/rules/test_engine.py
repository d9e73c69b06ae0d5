"""
tests/rules/test_engine.py

Covers:
  - compute_totals buckets, reserved sums, double-day counts, post-4
  - Totals monotonicity under adding / removing an entry
  - Chronology check (MIN before 180 SBL) including the exact boundary
  - Weekly coverage check and its threshold
  - check_caps ordering and messages
  - synchronize_double_day
"""

import datetime as dt

import pytest

from leaveplan.calendar import enumerate_days, iso_week_id, to_iso
from leaveplan.domain import DayEntry, DayType, ParentEntry
from leaveplan.rules import (
    Totals,
    check_caps,
    compute_totals,
    find_chronology_violations,
    synchronize_double_day,
    weeks_below_coverage_threshold,
)

D = dt.date
FAR_FUTURE = D(2030, 1, 1)


# ── Helpers ───────────────────────────────────────────────────────────────────

def mk(iso, a=(0, "OFF", False), b=(0, "OFF", False), double=False):
    return DayEntry(iso, a=ParentEntry(*a), b=ParentEntry(*b), double_day=double)


def sbl_days(start, n, fraction=1):
    days = enumerate_days(start, start + dt.timedelta(days=n - 1))
    return [mk(to_iso(d), a=(fraction, "SBL", False)) for d in days]


# ── compute_totals ────────────────────────────────────────────────────────────

class TestComputeTotals:

    def test_empty(self):
        assert compute_totals([], FAR_FUTURE) == Totals()

    def test_scenario_a(self):
        entries = [
            mk("2025-01-01", a=(1, "SBL", False)),
            mk("2025-01-02", a=(0.5, "MIN", False)),
        ]
        t = compute_totals(entries, FAR_FUTURE)
        assert t.a_sbl == 1.0
        assert t.a_min == 0.5
        assert t.b_sbl == 0.0
        assert t.b_min == 0.0
        assert t.post4 == 0.0

    def test_full_mix(self):
        entries = [
            mk("2025-01-01", a=(1, "SBL", False)),
            mk("2025-01-02", a=(0.5, "MIN", False)),
            mk("2030-01-02", a=(0.25, "SBL", False), b=(0.25, "SBL", False), double=True),
            mk("2030-01-03", a=(1, "SBL", True)),
        ]
        t = compute_totals(entries, FAR_FUTURE)
        assert t.a_sbl == pytest.approx(2.25)
        assert t.a_min == pytest.approx(0.5)
        assert t.b_sbl == pytest.approx(0.25)
        assert t.double_days_a == 1
        assert t.double_days_b == 1
        assert t.reserved_a == pytest.approx(1.0)
        assert t.reserved_b == 0.0
        assert t.post4 == pytest.approx(1.5)

    def test_reserved_counts_in_type_bucket_too(self):
        t = compute_totals([mk("2025-01-01", b=(0.75, "MIN", True))], FAR_FUTURE)
        assert t.b_min == 0.75
        assert t.reserved_b == 0.75

    def test_off_contributes_nothing(self):
        t = compute_totals([mk("2031-01-01", a=(1, "OFF", True))], FAR_FUTURE)
        assert t == Totals()

    def test_double_days_count_whole_days(self):
        entries = [
            mk("2025-01-01", a=(0.125, "SBL", False), b=(0.125, "SBL", False), double=True),
            mk("2025-01-02", a=(1, "MIN", False), b=(1, "MIN", False), double=True),
        ]
        t = compute_totals(entries, FAR_FUTURE)
        assert t.double_days_a == 2
        assert t.double_days_b == 2

    def test_post4_boundary_inclusive(self):
        entries = [mk("2029-12-31", a=(1, "SBL", False)), mk("2030-01-01", b=(0.5, "MIN", False))]
        assert compute_totals(entries, FAR_FUTURE).post4 == 0.5

    def test_order_independent(self):
        entries = sbl_days(D(2025, 1, 1), 10) + [mk("2024-06-01", b=(0.5, "MIN", False))]
        assert compute_totals(entries, FAR_FUTURE) == compute_totals(entries[::-1], FAR_FUTURE)

    def test_add_then_remove_round_trip(self):
        base = [mk("2025-01-01", a=(0.5, "MIN", False)), mk("2025-01-02", b=(1, "SBL", True))]
        before = compute_totals(base, FAR_FUTURE)
        added = compute_totals(base + [mk("2025-01-03", a=(0.25, "SBL", False))], FAR_FUTURE)
        assert added.a_sbl > before.a_sbl
        assert added.b_sbl == before.b_sbl
        assert compute_totals(base, FAR_FUTURE) == before

    def test_totals_properties(self):
        t = Totals(a_sbl=1, b_sbl=2, a_min=0.5, b_min=0.25)
        assert t.total_sbl == 3
        assert t.total_min == 0.75

    def test_input_not_mutated(self):
        entries = sbl_days(D(2025, 1, 1), 3)[::-1]
        snapshot = list(entries)
        compute_totals(entries, FAR_FUTURE)
        assert entries == snapshot


# ── Chronology ────────────────────────────────────────────────────────────────

class TestChronology:

    def test_scenario_b(self):
        sbl = sbl_days(D(2025, 1, 1), 179)                   # through 2025-06-28
        viol = mk("2025-07-01", a=(1, "MIN", False))
        more = mk("2025-08-01", a=(1, "SBL", False))
        ok = mk("2025-12-31", a=(1, "MIN", False))
        flagged = find_chronology_violations(sbl + [viol, more, ok])
        assert flagged == {"2025-07-01"}

    def test_exactly_180_not_flagged(self):
        entries = sbl_days(D(2025, 1, 1), 180) + [mk("2025-12-01", b=(0.5, "MIN", False))]
        assert find_chronology_violations(entries) == set()

    def test_just_under_180_flagged(self):
        entries = sbl_days(D(2025, 1, 1), 179) + [
            mk("2025-07-01", a=(0.75, "SBL", False)),
            mk("2025-07-02", a=(0.125, "SBL", False)),   # cumulative 179.875
            mk("2025-12-01", b=(0.5, "MIN", False)),
        ]
        assert find_chronology_violations(entries) == {"2025-12-01"}

    def test_same_day_sbl_does_not_excuse(self):
        entries = sbl_days(D(2025, 1, 1), 179) + [
            mk("2025-12-01", a=(1, "SBL", False), b=(1, "MIN", False)),
        ]
        assert find_chronology_violations(entries) == {"2025-12-01"}

    def test_both_parents_sbl_accumulate(self):
        days = enumerate_days(D(2025, 1, 1), D(2025, 3, 31))     # 90 days
        entries = [mk(to_iso(d), a=(1, "SBL", False), b=(1, "SBL", False), double=True) for d in days]
        entries.append(mk("2025-04-01", a=(1, "MIN", False)))
        assert find_chronology_violations(entries) == set()

    def test_unsorted_input(self):
        entries = sbl_days(D(2025, 1, 1), 180) + [mk("2024-12-31", a=(0.25, "MIN", False))]
        assert find_chronology_violations(entries[::-1]) == {"2024-12-31"}

    def test_zero_fraction_min_not_flagged(self):
        assert find_chronology_violations([mk("2025-01-01", a=(0, "MIN", False))]) == set()


# ── Weekly coverage ───────────────────────────────────────────────────────────

class TestWeeklyCoverage:

    BOUNDARY = D(2026, 1, 1)

    @staticmethod
    def week(monday, used_weekdays):
        out = []
        for i, d in enumerate(enumerate_days(monday, monday + dt.timedelta(days=6))):
            if i in used_weekdays:
                out.append(mk(to_iso(d), a=(1, "SBL", False)))
        return out

    def test_five_weekdays_not_flagged(self):
        entries = self.week(D(2026, 1, 5), {0, 1, 2, 3, 4})
        assert weeks_below_coverage_threshold(entries, self.BOUNDARY) == []

    def test_four_weekdays_flagged(self):
        entries = self.week(D(2026, 1, 5), {0, 1, 2, 3})
        assert weeks_below_coverage_threshold(entries, self.BOUNDARY) == ["2026-W02"]

    def test_weekend_days_do_not_count(self):
        entries = self.week(D(2026, 1, 5), {0, 1, 2, 3, 5, 6})
        assert weeks_below_coverage_threshold(entries, self.BOUNDARY) == ["2026-W02"]

    def test_before_boundary_ignored(self):
        entries = self.week(D(2025, 12, 1), {0})
        assert weeks_below_coverage_threshold(entries, self.BOUNDARY) == []

    def test_off_and_zero_days_do_not_count(self):
        entries = self.week(D(2026, 1, 5), {0, 1, 2, 3}) + [
            mk("2026-01-09", a=(1, "OFF", False)),
            mk("2026-01-09", b=(0, "SBL", False)),
        ]
        assert weeks_below_coverage_threshold(entries, self.BOUNDARY) == ["2026-W02"]

    def test_order_of_first_appearance(self):
        entries = self.week(D(2026, 2, 2), {0}) + self.week(D(2026, 1, 12), {1, 2})
        result = weeks_below_coverage_threshold(entries, self.BOUNDARY)
        assert result == [iso_week_id(D(2026, 1, 12)), iso_week_id(D(2026, 2, 2))]

    def test_custom_threshold(self):
        entries = self.week(D(2026, 1, 5), {0, 1})
        assert weeks_below_coverage_threshold(entries, self.BOUNDARY, threshold=2) == []


# ── Caps ──────────────────────────────────────────────────────────────────────

class TestCheckCaps:

    def test_no_violations(self):
        assert check_caps(Totals(a_sbl=195, b_sbl=195, a_min=45, b_min=45)) == []

    def test_at_cap_is_fine(self):
        t = Totals(reserved_a=90, double_days_b=60, post4=96)
        assert check_caps(t) == []

    def test_all_in_fixed_order(self):
        t = Totals(
            a_sbl=200, b_sbl=191, a_min=50, b_min=41,
            reserved_a=91, reserved_b=90.125,
            double_days_a=61, double_days_b=61, post4=96.5,
        )
        rules = [v.rule for v in check_caps(t)]
        assert rules == [
            "total_sbl", "total_min", "reserved_a", "reserved_b",
            "double_days_a", "double_days_b", "post4",
        ]

    def test_messages(self):
        t = Totals(a_sbl=391, b_min=91, reserved_b=91, double_days_a=61, post4=97)
        messages = [v.message for v in check_caps(t)]
        assert messages == [
            "Total SBL exceeds 390.",
            "Total MIN exceeds 90.",
            "Parent B reserved exceeds 90.",
            "Parent A double days exceed 60.",
            "Saved days after age 4 exceed 96.",
        ]

    def test_descriptor_carries_cap_and_value(self):
        (v,) = check_caps(Totals(post4=100))
        assert v.cap == 96
        assert v.value == 100

    def test_from_real_entries(self):
        entries = sbl_days(D(2025, 1, 1), 391)
        (v,) = check_caps(compute_totals(entries, FAR_FUTURE))
        assert v.rule == "total_sbl"


# ── Double-day synchronization ────────────────────────────────────────────────

class TestSynchronizeDoubleDay:

    def test_scenario_c(self):
        e = mk("2025-01-01", a=(0.25, "SBL", True), b=(0, "OFF", True))
        s = synchronize_double_day(e, 0.5, DayType.SBL)
        assert s.double_day
        assert s.a.fraction == s.b.fraction == 0.5
        assert s.a.type is s.b.type is DayType.SBL
        assert not s.a.reserved and not s.b.reserved

    def test_does_not_mutate_input(self):
        e = mk("2025-01-01", a=(0.25, "SBL", True))
        synchronize_double_day(e, 1, "MIN")
        assert e.a == ParentEntry(0.25, DayType.SBL, True)
        assert not e.double_day

    def test_idempotent(self):
        e = mk("2025-01-01", b=(0.75, "MIN", False))
        once = synchronize_double_day(e, 0.75, DayType.MIN)
        assert synchronize_double_day(once, 0.75, DayType.MIN) == once

    @pytest.mark.parametrize("fraction, day_type", [(0.5, "OFF"), (0, "SBL")])
    def test_rejects_empty_double_day(self, fraction, day_type):
        with pytest.raises(ValueError):
            synchronize_double_day(mk("2025-01-01"), fraction, day_type)
