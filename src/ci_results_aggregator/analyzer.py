"""
Aggregation of per-job CI results into group and global rollups.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from .classifier import calculate_report, count_percentage
from .config import AggregatorConfig
from .exceptions import InvalidInputError
from .grouping import has_groups, resolve_groups
from .messages import Messages
from .models import (
    AggregatedResult,
    GroupReport,
    JobGroup,
    JobRecord,
    JobReport,
    JobStatus,
    Results,
)
from .sorting import sort_jobs

logger = logging.getLogger(__name__)

# Global counter incremented for each job status
_GLOBAL_COUNTERS = {
    JobStatus.SUCCESS: "success_jobs",
    JobStatus.FIXED: "fixed_jobs",
    JobStatus.RUNNING: "running_jobs",
    JobStatus.FAILURE: "failed_jobs",
    JobStatus.STILL_FAILING: "keep_fail_jobs",
    JobStatus.UNSTABLE: "unstable_jobs",
    JobStatus.STILL_UNSTABLE: "keep_unstable_jobs",
    JobStatus.ABORTED: "aborted_jobs",
}


@dataclass
class _GroupTally:
    """Per-group accumulator folded into a GroupReport once the group is done."""

    success: int = 0
    failed: int = 0
    unstable: int = 0
    aborted: int = 0
    running: int = 0
    found_failure: bool = False
    found_running: bool = False
    found_skip: bool = False

    def count(self, status: JobStatus) -> None:
        if status in (JobStatus.SUCCESS, JobStatus.FIXED):
            self.success += 1
        elif status is JobStatus.RUNNING:
            self.found_running = True
            self.running += 1
        elif status.is_failure:
            self.found_failure = True
            self.failed += 1
        elif status.is_skip:
            self.found_skip = True
            if status is JobStatus.ABORTED:
                self.aborted += 1
            else:
                self.unstable += 1

    @property
    def status(self) -> JobStatus:
        if self.found_failure:
            return JobStatus.FAILURE
        if self.found_running:
            return JobStatus.RUNNING
        if self.found_skip:
            return JobStatus.UNSTABLE
        return JobStatus.SUCCESS

    def to_report(self, results: Results) -> GroupReport:
        report = GroupReport(
            job_success=self.success,
            job_failed=self.failed,
            job_unstable=self.unstable,
            job_aborted=self.aborted,
            job_running=self.running,
            results=results,
            status=self.status,
        )
        report.percentage = count_percentage(report.job_success, report.job_count)
        return report


class Analyzer:
    """Classifies, aggregates and orders collected job records."""

    def __init__(
        self,
        log: Optional[logging.Logger] = None,
        messages: Optional[Messages] = None,
    ):
        self.log = log or logger
        self.messages = messages or Messages()

    def analyze(
        self,
        records: Sequence[JobRecord],
        config: Optional[AggregatorConfig] = None,
        now: Optional[datetime] = None,
    ) -> AggregatedResult:
        """
        Aggregate job records for reporting.

        Args:
            records: Job records with results already collected
            config: Staleness threshold and sort key; defaults apply when omitted
            now: Reference time for staleness checks (defaults to current time)

        Returns:
            AggregatedResult with reports attached to every record

        Raises:
            InvalidInputError: If records is None
        """
        if records is None:
            raise InvalidInputError("records must be a sequence of JobRecord, got None")
        config = config or AggregatorConfig()
        now = now or datetime.now()

        aggregated = AggregatedResult(grouped=has_groups(records))
        aggregated.groups = resolve_groups(records)
        self.log.debug(
            "Analyzing %d job(s) in %d group(s)", len(records), len(aggregated.groups)
        )

        for group in aggregated.groups:
            self._analyze_group(group, aggregated, config, now)

        sort_jobs(aggregated.groups, config.sort_jobs_by)

        self.log.info(self.messages.analyze_finished())
        return aggregated

    def _analyze_group(
        self,
        group: JobGroup,
        aggregated: AggregatedResult,
        config: AggregatorConfig,
        now: datetime,
    ) -> None:
        tally = _GroupTally()
        group_results = Results()

        for job in group.jobs:
            job.report = JobReport()
            if job.results is None:
                self.log.warning(self.messages.no_results(job.job_name))
                continue

            report = calculate_report(job.report, job.results, config.out_of_date_hours, now)
            if job.build_info is not None:
                report.duration = job.build_info.duration
                report.description = job.build_info.description
                aggregated.total_duration += job.build_info.duration
                aggregated.total_number_of_changes += job.results.number_of_changes

            counter = _GLOBAL_COUNTERS[report.status]
            setattr(aggregated, counter, getattr(aggregated, counter) + 1)
            tally.count(report.status)

            group_results.pass_count += job.results.pass_count
            group_results.skip += job.results.skip
            group_results.total += job.results.total
            aggregated.results.add(job.results)

        group.report = tally.to_report(group_results)
