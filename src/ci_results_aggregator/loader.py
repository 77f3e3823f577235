"""
Loading of collected job records from YAML or JSON documents.
"""

import logging
from dataclasses import fields
from datetime import datetime
from typing import Any, Dict, List, Optional

import yaml

from .classifier import BUILD_OUTCOMES
from .exceptions import RecordFormatError
from .models import BuildInfo, JobRecord, JobStatus, Results

logger = logging.getLogger(__name__)

_RESULTS_FIELDS = {f.name for f in fields(Results)}
_BUILD_INFO_FIELDS = {f.name for f in fields(BuildInfo)}
_RESULTS_ALIASES = {"pass": "pass_count", "changes": "number_of_changes"}

_INT_FIELDS = (
    "pass_count",
    "fail",
    "skip",
    "total",
    "number_of_changes",
    "cc_packages",
    "cc_files",
    "cc_classes",
    "cc_methods",
    "cc_lines",
    "cc_conditions",
)
_FLOAT_FIELDS = ("duration", "percentage")


def _parse_timestamp(value: Any, source: str) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    text = str(value)
    # fromisoformat only accepts a trailing "Z" from Python 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise RecordFormatError(source, f"invalid timestamp: {value!r}")


def _check_number(values: Dict[str, Any], name: str, types: tuple, source: str) -> None:
    value = values.get(name)
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, types):
        raise RecordFormatError(source, f"{name} must be a number, got {value!r}")


def _check_outcomes(values: Dict[str, Any], source: str) -> None:
    result = values.get("result")
    if result is not None and str(result).upper() not in BUILD_OUTCOMES:
        raise RecordFormatError(source, f"unknown build result: {result!r}")
    previous = values.get("previous_result")
    if previous is not None and JobStatus.from_name(str(previous)) is None:
        raise RecordFormatError(source, f"unknown previous result: {previous!r}")


def _results_from_dict(data: Any, source: str) -> Results:
    if not isinstance(data, dict):
        raise RecordFormatError(source, "results must be a mapping")
    values = {_RESULTS_ALIASES.get(key, key): value for key, value in data.items()}
    unknown = sorted(set(values) - _RESULTS_FIELDS)
    if unknown:
        raise RecordFormatError(source, f"unknown results fields: {', '.join(unknown)}")
    for name in _INT_FIELDS:
        _check_number(values, name, (int,), source)
    for name in _FLOAT_FIELDS:
        _check_number(values, name, (int, float), source)
    _check_outcomes(values, source)
    values["timestamp"] = _parse_timestamp(values.get("timestamp"), source)
    return Results(**values)


def _build_info_from_dict(data: Any, source: str) -> BuildInfo:
    if not isinstance(data, dict):
        raise RecordFormatError(source, "build_info must be a mapping")
    unknown = sorted(set(data) - _BUILD_INFO_FIELDS)
    if unknown:
        raise RecordFormatError(source, f"unknown build_info fields: {', '.join(unknown)}")
    values = dict(data)
    _check_number(values, "duration", (int, float), source)
    if values.get("description") is not None:
        values["description"] = str(values["description"])
    values["timestamp"] = _parse_timestamp(values.get("timestamp"), source)
    return BuildInfo(**values)


def record_from_dict(data: Dict[str, Any], source: str = "<dict>") -> JobRecord:
    """
    Build a JobRecord from a mapping.

    Args:
        data: Mapping with ``name`` and optional ``friendly_name``, ``group``,
            ``results`` and ``build_info`` entries
        source: Where the mapping came from, used in error messages

    Returns:
        JobRecord without a report

    Raises:
        RecordFormatError: If the mapping is malformed
    """
    if not isinstance(data, dict):
        raise RecordFormatError(source, f"job entry must be a mapping, got {type(data).__name__}")
    if not data.get("name"):
        raise RecordFormatError(source, "job entry is missing name")

    results = data.get("results")
    build_info = data.get("build_info")
    friendly_name = data.get("friendly_name")
    group = data.get("group")
    return JobRecord(
        job_name=str(data["name"]),
        friendly_name=str(friendly_name) if friendly_name is not None else None,
        group_name=str(group) if group is not None else None,
        results=_results_from_dict(results, source) if results is not None else None,
        build_info=_build_info_from_dict(build_info, source) if build_info is not None else None,
    )


def load_records(path: str) -> List[JobRecord]:
    """
    Load job records from a YAML or JSON file.

    The document is either a list of job entries or a mapping with a
    ``jobs`` list.

    Raises:
        FileNotFoundError: If the file doesn't exist
        RecordFormatError: If the document is malformed
    """
    logger.info("Loading job records from %s", path)
    try:
        with open(path, "r") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RecordFormatError(path, f"invalid YAML/JSON: {e}")
    except FileNotFoundError:
        raise FileNotFoundError(f"Job records file not found: {path}")

    if isinstance(document, dict):
        document = document.get("jobs")
    if not isinstance(document, list):
        raise RecordFormatError(path, "expected a list of jobs or a mapping with a 'jobs' list")

    records = [record_from_dict(entry, path) for entry in document]
    logger.debug("Loaded %d job record(s)", len(records))
    return records
