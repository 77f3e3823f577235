"""
Data models for the CI results aggregator.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class JobStatus(Enum):
    """Status of a job or group, ordered by display priority (lower is more severe)."""

    FAILURE = 1
    STILL_FAILING = 2
    UNSTABLE = 3
    STILL_UNSTABLE = 4
    ABORTED = 5
    RUNNING = 6
    FIXED = 7
    SUCCESS = 8

    @property
    def priority(self) -> int:
        return self.value

    @property
    def is_failure(self) -> bool:
        return self in (JobStatus.FAILURE, JobStatus.STILL_FAILING)

    @property
    def is_skip(self) -> bool:
        return self in (JobStatus.UNSTABLE, JobStatus.STILL_UNSTABLE, JobStatus.ABORTED)

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["JobStatus"]:
        """Look up a status by name, ignoring case. Returns None for unknown names."""
        if not name:
            return None
        return cls.__members__.get(name.strip().upper())


@dataclass
class Results:
    """Raw test counters collected for one job build."""

    pass_count: int = 0
    fail: int = 0
    skip: int = 0
    total: int = 0
    number_of_changes: int = 0
    timestamp: Optional[datetime] = None
    duration: Optional[float] = None
    percentage: Optional[float] = None
    # Build outcome cues used by the classifier
    result: Optional[str] = None
    previous_result: Optional[str] = None
    building: bool = False
    # Code coverage
    cc_packages: int = 0
    cc_files: int = 0
    cc_classes: int = 0
    cc_methods: int = 0
    cc_lines: int = 0
    cc_conditions: int = 0
    sonar_url: Optional[str] = None
    report_url: Optional[str] = None

    def add(self, other: "Results") -> None:
        """Add another job's counters to this one."""
        self.pass_count += other.pass_count
        self.fail += other.fail
        self.skip += other.skip
        self.total += other.total
        self.number_of_changes += other.number_of_changes


@dataclass
class BuildInfo:
    """Build metadata for the last build of a job."""

    duration: float = 0.0
    description: str = ""
    timestamp: Optional[datetime] = None


@dataclass
class JobReport:
    """Display figures derived from a job's Results during one analysis run."""

    status: Optional[JobStatus] = None
    total: int = 0
    pass_count: int = 0
    fail: int = 0
    fail_color: str = ""
    skip: int = 0
    out_of_date: bool = False
    changes: int = 0
    report_url: str = ""
    sonar_url: str = ""
    cc_packages: int = 0
    cc_files: int = 0
    cc_classes: int = 0
    cc_methods: int = 0
    cc_lines: int = 0
    cc_conditions: int = 0
    duration: float = 0.0
    description: str = ""
    percentage: float = 0.0


@dataclass
class JobRecord:
    """One CI job as collected by the data fetcher."""

    job_name: str
    friendly_name: Optional[str] = None
    group_name: Optional[str] = None
    results: Optional[Results] = None
    build_info: Optional[BuildInfo] = None
    report: Optional[JobReport] = None

    @property
    def resolved_name(self) -> str:
        """Name shown in reports: the friendly name when set, else the job name."""
        return self.friendly_name or self.job_name


@dataclass
class GroupReport:
    """Rollup of the jobs in one group."""

    job_success: int = 0
    job_failed: int = 0
    job_unstable: int = 0
    job_aborted: int = 0
    job_running: int = 0
    results: Results = field(default_factory=Results)
    status: JobStatus = JobStatus.SUCCESS
    percentage: float = 0.0

    @property
    def job_count(self) -> int:
        return (
            self.job_success
            + self.job_failed
            + self.job_unstable
            + self.job_aborted
            + self.job_running
        )


@dataclass
class JobGroup:
    """A named cluster of jobs. The implicit group has an empty name."""

    name: str
    jobs: List[JobRecord] = field(default_factory=list)
    report: GroupReport = field(default_factory=GroupReport)


@dataclass
class AggregatedResult:
    """Output of one analysis run."""

    groups: List[JobGroup] = field(default_factory=list)
    grouped: bool = False
    success_jobs: int = 0
    fixed_jobs: int = 0
    running_jobs: int = 0
    failed_jobs: int = 0
    keep_fail_jobs: int = 0
    unstable_jobs: int = 0
    keep_unstable_jobs: int = 0
    aborted_jobs: int = 0
    total_duration: float = 0.0
    total_number_of_changes: int = 0
    results: Results = field(default_factory=Results)

    @property
    def records(self) -> List[JobRecord]:
        """All records in final order, group by group."""
        return [job for group in self.groups for job in group.jobs]

    @property
    def total_jobs(self) -> int:
        """Number of jobs that had results."""
        return (
            self.success_jobs
            + self.fixed_jobs
            + self.running_jobs
            + self.failed_jobs
            + self.keep_fail_jobs
            + self.unstable_jobs
            + self.keep_unstable_jobs
            + self.aborted_jobs
        )

    @property
    def success(self) -> bool:
        """Return True if no job is failing."""
        return self.failed_jobs == 0 and self.keep_fail_jobs == 0

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable view of the aggregation."""
        return {
            "summary": {
                "total_jobs": self.total_jobs,
                "success": self.success_jobs,
                "fixed": self.fixed_jobs,
                "running": self.running_jobs,
                "failed": self.failed_jobs,
                "still_failing": self.keep_fail_jobs,
                "unstable": self.unstable_jobs,
                "still_unstable": self.keep_unstable_jobs,
                "aborted": self.aborted_jobs,
                "total_duration": self.total_duration,
                "total_changes": self.total_number_of_changes,
                "pass": self.results.pass_count,
                "fail": self.results.fail,
                "skip": self.results.skip,
                "total": self.results.total,
            },
            "grouped": self.grouped,
            "groups": [
                {
                    "name": group.name,
                    "status": group.report.status.name,
                    "percentage": group.report.percentage,
                    "jobs": [_job_to_dict(job) for job in group.jobs],
                }
                for group in self.groups
            ],
        }


def _job_to_dict(job: JobRecord) -> Dict[str, Any]:
    report = job.report
    if report is None or report.status is None:
        return {"name": job.resolved_name, "status": None}
    return {
        "name": job.resolved_name,
        "status": report.status.name,
        "total": report.total,
        "pass": report.pass_count,
        "fail": report.fail,
        "skip": report.skip,
        "percentage": report.percentage,
        "out_of_date": report.out_of_date,
        "changes": report.changes,
        "duration": report.duration,
        "description": report.description,
    }
