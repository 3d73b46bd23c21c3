"""
Results report for a filter run.

Renders the plain-text processing report (results.txt): run date, summary
counts, and itemized lists of skipped pregnancies and clients with reasons.
"""

import os
from datetime import datetime, timezone
from typing import List, Optional

from core.config import ValidationPolicy
from core.statistics import FilterStatistics


REPORT_FILENAME = "results.txt"
REPORT_WIDTH = 60


def report_path_for(output_path: str) -> str:
    """The report lives next to the output file."""
    return os.path.join(os.path.dirname(os.path.abspath(output_path)), REPORT_FILENAME)


def format_run_date(run_date: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2026-01-02T03:04:05.678Z."""
    if run_date.tzinfo is None:
        run_date = run_date.replace(tzinfo=timezone.utc)
    run_date = run_date.astimezone(timezone.utc)
    return run_date.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def generate_results_report(
    statistics: FilterStatistics,
    policy: ValidationPolicy,
    run_date: Optional[datetime] = None
) -> str:
    """
    Render the results report.

    Args:
        statistics: Statistics of the finished run
        policy: Validation policy used (skipped pregnancies only exist under SALVAGE)
        run_date: Timestamp to print; defaults to now

    Returns:
        Report text
    """
    run_date = run_date or datetime.now(timezone.utc)
    heavy = '=' * REPORT_WIDTH
    light = '-' * REPORT_WIDTH

    lines: List[str] = [
        heavy,
        'DATA FILTERING RESULTS REPORT',
        heavy,
        '',
        f'Run Date: {format_run_date(run_date)}',
        f'Validation Policy: {policy.value}',
        '',
        light,
        'SUMMARY',
        light,
        f'Total Clients Processed: {statistics.total_clients}',
        f'Successfully Transformed: {statistics.success_count}',
        f'Skipped Clients: {statistics.skipped_clients_count}',
    ]
    if policy is ValidationPolicy.SALVAGE:
        lines.append(f'Skipped Pregnancies: {statistics.skipped_pregnancies_count}')
    lines.append('')

    if statistics.skipped_pregnancies:
        lines.extend([light, 'SKIPPED PREGNANCIES', light])
        for skipped in statistics.skipped_pregnancies:
            lines.append(f'  Client ID: {skipped.client_id}, Pregnancy ID: {skipped.pregnancy_id}')
            lines.append(f'    Reason: {skipped.reason}')
            lines.append('')

    if statistics.skipped_clients:
        lines.extend([light, 'SKIPPED CLIENTS', light])
        for skipped in statistics.skipped_clients:
            lines.append(f'  Client ID: {skipped.id}')
            lines.append(f'    Reason: {skipped.reason}')
            lines.append('')

    lines.extend([heavy, 'END OF REPORT', heavy])

    return '\n'.join(lines)


class ReportWriter:
    """Renders results.txt for one validation policy."""

    def __init__(self, policy: ValidationPolicy):
        self.policy = policy

    def render(self, statistics: FilterStatistics, run_date: Optional[datetime] = None) -> str:
        return generate_results_report(statistics, self.policy, run_date)
