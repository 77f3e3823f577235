"""
Grouping of job records by their group label.
"""

from itertools import groupby
from typing import List, Sequence

from .models import JobGroup, JobRecord


def _label(record: JobRecord) -> str:
    return record.group_name or ""


def has_groups(records: Sequence[JobRecord]) -> bool:
    """Return True if at least one record carries a non-empty group label."""
    return any(record.group_name for record in records)


def resolve_groups(records: Sequence[JobRecord]) -> List[JobGroup]:
    """
    Split records into groups.

    With labels present, records are stably sorted by label and unlabeled
    records form a group named ``""``. Without labels, a single group holds
    every record in input order.
    """
    if not has_groups(records):
        return [JobGroup(name="", jobs=list(records))]

    ordered = sorted(records, key=_label)
    return [
        JobGroup(name=name, jobs=list(members)) for name, members in groupby(ordered, key=_label)
    ]
