"""
Message catalog for diagnostics emitted during analysis.
"""

from dataclasses import dataclass


@dataclass
class Messages:
    """Format templates for analyzer log lines. Replace to change wording."""

    no_results_template: str = "Not found results for {job_name}"
    analyze_finished_template: str = "Analyze finished"

    def no_results(self, job_name: str) -> str:
        return self.no_results_template.format(job_name=job_name)

    def analyze_finished(self) -> str:
        return self.analyze_finished_template
