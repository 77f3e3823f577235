"""Tests for job ordering."""

from datetime import datetime

import pytest

from src.ci_results_aggregator.models import JobGroup, JobRecord, JobReport, JobStatus, Results
from src.ci_results_aggregator.sorting import SortBy, compare_jobs, sort_jobs


def _job(name, status=JobStatus.SUCCESS, friendly_name=None, **results):
    return JobRecord(
        job_name=name,
        friendly_name=friendly_name,
        results=Results(**results),
        report=JobReport(status=status),
    )


def _names(group):
    return [j.job_name for j in group.jobs]


class TestSortByParse:
    """Tests for SortBy.parse."""

    def test_case_insensitive(self):
        assert SortBy.parse("status") == SortBy.STATUS
        assert SortBy.parse("Total_Test") == SortBy.TOTAL_TEST
        assert SortBy.parse(" LAST_RUN ") == SortBy.LAST_RUN

    def test_unknown_falls_back_to_name(self):
        assert SortBy.parse("colour") == SortBy.NAME

    def test_absent_falls_back_to_name(self):
        assert SortBy.parse(None) == SortBy.NAME
        assert SortBy.parse("") == SortBy.NAME

    def test_member_passthrough(self):
        assert SortBy.parse(SortBy.FAIL) == SortBy.FAIL


class TestSortJobs:
    """Tests for sort_jobs function."""

    def test_name_uses_friendly_name(self):
        group = JobGroup(
            name="",
            jobs=[
                _job("zz-build", friendly_name="Alpha"),
                _job("bravo"),
                _job("aa-build", friendly_name="Charlie"),
            ],
        )
        sort_jobs([group], "name")
        assert _names(group) == ["zz-build", "bravo", "aa-build"]

    def test_name_sort_is_idempotent(self):
        group = JobGroup(name="", jobs=[_job("c"), _job("a"), _job("b")])
        sort_jobs([group], SortBy.NAME)
        first = _names(group)
        sort_jobs([group], SortBy.NAME)
        assert _names(group) == first == ["a", "b", "c"]

    def test_default_key_is_name(self):
        group = JobGroup(name="", jobs=[_job("b"), _job("a")])
        sort_jobs([group])
        assert _names(group) == ["a", "b"]
        sort_jobs([group], "bogus")
        assert _names(group) == ["a", "b"]

    def test_status_puts_failures_first(self):
        group = JobGroup(
            name="",
            jobs=[
                _job("ok", JobStatus.SUCCESS),
                _job("flaky", JobStatus.UNSTABLE),
                _job("broken", JobStatus.FAILURE),
                _job("still", JobStatus.STILL_FAILING),
            ],
        )
        sort_jobs([group], "STATUS")
        assert _names(group) == ["broken", "still", "flaky", "ok"]

    @pytest.mark.parametrize(
        "key,field",
        [
            ("TOTAL_TEST", "total"),
            ("PASS", "pass_count"),
            ("FAIL", "fail"),
            ("SKIP", "skip"),
        ],
    )
    def test_counters_descending(self, key, field):
        group = JobGroup(
            name="",
            jobs=[_job("low", **{field: 1}), _job("high", **{field: 9}), _job("mid", **{field: 5})],
        )
        sort_jobs([group], key)
        assert _names(group) == ["high", "mid", "low"]

    @pytest.mark.parametrize(
        "key,field,low,mid,high",
        [
            ("COMMITS", "number_of_changes", 1, 3, 7),
            ("DURATION", "duration", 10.0, 30.0, 70.0),
            ("PERCENTAGE", "percentage", 10.0, 50.0, 90.0),
            ("LAST_RUN", "timestamp", datetime(2024, 1, 1), datetime(2024, 2, 1), datetime(2024, 3, 1)),
        ],
    )
    def test_ascending_keys(self, key, field, low, mid, high):
        group = JobGroup(
            name="",
            jobs=[
                _job("high", **{field: high}),
                _job("low", **{field: low}),
                _job("mid", **{field: mid}),
            ],
        )
        sort_jobs([group], key)
        assert _names(group) == ["low", "mid", "high"]

    def test_each_group_sorted_independently(self):
        g1 = JobGroup(name="a", jobs=[_job("y"), _job("x")])
        g2 = JobGroup(name="b", jobs=[_job("d"), _job("c")])
        sort_jobs([g1, g2], SortBy.NAME)
        assert _names(g1) == ["x", "y"]
        assert _names(g2) == ["c", "d"]

    def test_missing_results_does_not_abort_sort(self):
        missing = JobRecord(job_name="missing", report=JobReport())
        group = JobGroup(name="", jobs=[_job("a", total=3), missing, _job("b", total=5)])
        sort_jobs([group], SortBy.TOTAL_TEST)
        assert sorted(_names(group)) == ["a", "b", "missing"]


class TestCompareJobs:
    """Tests for compare_jobs fallback behaviour."""

    def test_left_side_without_results_sorts_first(self):
        missing = JobRecord(job_name="missing")
        assert compare_jobs(missing, _job("a", total=1), SortBy.TOTAL_TEST) == -1

    def test_right_side_without_results_also_gives_minus_one(self):
        missing = JobRecord(job_name="missing")
        assert compare_jobs(_job("a", total=1), missing, SortBy.TOTAL_TEST) == -1

    def test_status_without_report_gives_minus_one(self):
        assert compare_jobs(JobRecord("x"), JobRecord("y"), SortBy.STATUS) == -1

    def test_none_timestamps_give_minus_one(self):
        assert compare_jobs(_job("a"), _job("b"), SortBy.LAST_RUN) == -1

    def test_regular_comparison(self):
        assert compare_jobs(_job("a"), _job("b"), SortBy.NAME) < 0
        assert compare_jobs(_job("b"), _job("a"), SortBy.NAME) > 0
        assert compare_jobs(_job("a"), _job("a"), SortBy.NAME) == 0
