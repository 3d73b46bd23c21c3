"""
CSV export of skipped entries.

One row per skipped client or pregnancy, for loading the skip list into a
spreadsheet next to results.txt.
"""

import csv
import io
from typing import Dict, List

from core.statistics import FilterStatistics


class SkippedEntriesCSVWriter:
    """Renders skipped clients and pregnancies as CSV."""

    FIELDNAMES = ['kind', 'client_id', 'pregnancy_id', 'reason']

    def rows(self, statistics: FilterStatistics) -> List[Dict[str, object]]:
        """Skipped pregnancies first, then skipped clients (report order)."""
        rows = [
            {
                'kind': 'pregnancy',
                'client_id': s.client_id,
                'pregnancy_id': s.pregnancy_id,
                'reason': s.reason,
            }
            for s in statistics.skipped_pregnancies
        ]
        rows.extend(
            {
                'kind': 'client',
                'client_id': s.id,
                'pregnancy_id': '',
                'reason': s.reason,
            }
            for s in statistics.skipped_clients
        )
        return rows

    def render(self, statistics: FilterStatistics) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=self.FIELDNAMES, lineterminator='\n')
        writer.writeheader()
        writer.writerows(self.rows(statistics))
        return buffer.getvalue()
