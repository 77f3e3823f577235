"""
Job status classification and per-job report calculation.
"""

from datetime import datetime, timedelta
from typing import Optional

from .models import JobReport, JobStatus, Results

# Raw build outcomes that map directly onto a status
BUILD_OUTCOMES = {
    "SUCCESS": JobStatus.SUCCESS,
    "FAILURE": JobStatus.FAILURE,
    "UNSTABLE": JobStatus.UNSTABLE,
    "ABORTED": JobStatus.ABORTED,
}

FAIL_COLOR = "red"


def classify(results: Results, previous_status: Optional[JobStatus] = None) -> JobStatus:
    """
    Derive the status of a job from its raw results.

    Args:
        results: Raw results of the latest build
        previous_status: Status of the previous build. Falls back to
            ``results.previous_result`` when not given.

    Returns:
        The JobStatus for the job
    """
    if results.building:
        return JobStatus.RUNNING

    current = BUILD_OUTCOMES.get((results.result or "").upper())
    if current is None:
        current = JobStatus.UNSTABLE if results.fail > 0 else JobStatus.SUCCESS

    if previous_status is None:
        previous_status = JobStatus.from_name(results.previous_result)
    if previous_status is None:
        return current

    if current is JobStatus.FAILURE and previous_status.is_failure:
        return JobStatus.STILL_FAILING
    if current is JobStatus.UNSTABLE and previous_status in (
        JobStatus.UNSTABLE,
        JobStatus.STILL_UNSTABLE,
    ):
        return JobStatus.STILL_UNSTABLE
    if current is JobStatus.SUCCESS and (
        previous_status.is_failure
        or previous_status in (JobStatus.UNSTABLE, JobStatus.STILL_UNSTABLE)
    ):
        return JobStatus.FIXED
    return current


def count_percentage(part: float, whole: float) -> float:
    """Return ``part`` as a percentage of ``whole``, rounded to 2 decimals."""
    if not whole:
        return 0.0
    return round(part * 100.0 / whole, 2)


def calculate_counts(report: JobReport, results: Optional[Results]) -> None:
    """Set total/pass/fail/skip on the report. ``None`` zeroes them."""
    if results is None:
        report.total = 0
        report.pass_count = 0
        report.fail = 0
        report.fail_color = ""
        report.skip = 0
        return
    report.total = results.total
    report.pass_count = results.pass_count
    report.fail = results.fail
    report.fail_color = FAIL_COLOR if results.fail > 0 else ""
    report.skip = results.skip


def is_out_of_date(
    timestamp: Optional[datetime], out_of_date_hours: int, now: datetime
) -> bool:
    """Return True if the last run is older than the threshold (disabled when <= 0)."""
    if out_of_date_hours <= 0 or timestamp is None:
        return False
    # Compare aware timestamps against an aware reference time
    if timestamp.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()
    elif timestamp.tzinfo is None and now.tzinfo is not None:
        timestamp = timestamp.replace(tzinfo=now.tzinfo)
    return timestamp < now - timedelta(hours=out_of_date_hours)


def calculate_report(
    report: JobReport,
    results: Results,
    out_of_date_hours: int = 0,
    now: Optional[datetime] = None,
) -> JobReport:
    """
    Fill a job report from raw results.

    Failing jobs keep their status but report zeroed counts, since the
    partial counts of a failed build are not meaningful.

    Args:
        report: Fresh JobReport to fill
        results: Raw results of the job
        out_of_date_hours: Staleness threshold in hours
        now: Reference time for the staleness check

    Returns:
        The same report, for chaining
    """
    report.status = classify(results)
    calculate_counts(report, results)
    report.out_of_date = is_out_of_date(
        results.timestamp, out_of_date_hours, now or datetime.now()
    )
    report.changes = results.number_of_changes
    report.report_url = results.report_url or ""
    report.sonar_url = results.sonar_url or ""
    report.cc_packages = results.cc_packages
    report.cc_files = results.cc_files
    report.cc_classes = results.cc_classes
    report.cc_methods = results.cc_methods
    report.cc_lines = results.cc_lines
    report.cc_conditions = results.cc_conditions
    report.percentage = count_percentage(results.pass_count, results.total)

    if report.status.is_failure:
        calculate_counts(report, None)
    return report
