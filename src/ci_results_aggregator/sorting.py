"""
Ordering of jobs inside each group.
"""

import logging
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, Optional, Sequence

from .models import JobGroup, JobRecord

logger = logging.getLogger(__name__)


class SortBy(Enum):
    """Keys jobs can be ordered by."""

    NAME = "name"
    STATUS = "status"
    TOTAL_TEST = "total_test"
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    LAST_RUN = "last_run"
    COMMITS = "commits"
    DURATION = "duration"
    PERCENTAGE = "percentage"

    @classmethod
    def parse(cls, value: Any) -> "SortBy":
        """Match a key name ignoring case. Unknown or empty values give NAME."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.NAME
        return cls.__members__.get(str(value).strip().upper(), cls.NAME)


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


Comparator = Callable[[JobRecord, JobRecord], int]

_COMPARATORS: Dict[SortBy, Comparator] = {
    SortBy.NAME: lambda j1, j2: _cmp(j1.resolved_name, j2.resolved_name),
    SortBy.STATUS: lambda j1, j2: j1.report.status.priority - j2.report.status.priority,
    SortBy.TOTAL_TEST: lambda j1, j2: j2.results.total - j1.results.total,
    SortBy.PASS: lambda j1, j2: j2.results.pass_count - j1.results.pass_count,
    SortBy.FAIL: lambda j1, j2: j2.results.fail - j1.results.fail,
    SortBy.SKIP: lambda j1, j2: j2.results.skip - j1.results.skip,
    SortBy.LAST_RUN: lambda j1, j2: _cmp(j1.results.timestamp, j2.results.timestamp),
    SortBy.COMMITS: lambda j1, j2: j1.results.number_of_changes - j2.results.number_of_changes,
    SortBy.DURATION: lambda j1, j2: _cmp(j1.results.duration, j2.results.duration),
    SortBy.PERCENTAGE: lambda j1, j2: _cmp(j1.results.percentage, j2.results.percentage),
}


def compare_jobs(job1: JobRecord, job2: JobRecord, sort_by: SortBy) -> int:
    """
    Three-way compare two jobs on one key.

    A job without results or report cannot be compared on most keys. Such a
    pair resolves to -1 (the left job first) so that sorting always completes.
    """
    try:
        return _COMPARATORS[sort_by](job1, job2)
    except (AttributeError, TypeError):
        return -1


def sort_jobs(groups: Sequence[JobGroup], sort_by: Optional[Any] = None) -> None:
    """Sort the jobs of every group in place by the given key."""
    key = SortBy.parse(sort_by)
    logger.debug("Sorting jobs of %d group(s) by %s", len(groups), key.name)
    for group in groups:
        group.jobs.sort(key=cmp_to_key(lambda j1, j2: compare_jobs(j1, j2, key)))
