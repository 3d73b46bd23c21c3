"""
Filter Pipeline Orchestration.

FilterPipeline is the in-memory core:
1. Validate each client under the configured policy
2. Filter surviving clients onto the whitelists
3. Accumulate output records and statistics

FilterJob wraps it for a file run:
1. Read the input dataset
2. Run the pipeline
3. Write the filtered dataset and results.txt (and optionally a skip CSV)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.config import Config
from core.filters import EntityFilter
from core.memory_monitor import MemoryMonitor
from core.statistics import FilterStatistics
from core.validation import RecordValidator


logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Filtered records plus the statistics of the run."""
    records: List[Dict[str, Any]] = field(default_factory=list)
    statistics: FilterStatistics = field(default_factory=FilterStatistics)


class FilterPipeline:
    """
    Validates and filters a list of client records.

    Each client is handled independently and in input order; the output keeps
    that order. The input is never modified.
    """

    def __init__(self, config: Config):
        """
        Initialize pipeline.

        Args:
            config: Configuration object
        """
        self.config = config
        self.validator = RecordValidator(config)
        self.entity_filter = EntityFilter(config)

    def run(self, records: Any) -> PipelineResult:
        """
        Validate and filter all client records.

        Args:
            records: Parsed input; must be a list of clients

        Returns:
            PipelineResult with filtered clients and statistics

        Raises:
            ValueError: if ``records`` is not a list
        """
        if not isinstance(records, list):
            raise ValueError(
                f"Input data must be an array of clients, got {type(records).__name__}"
            )

        result = PipelineResult()
        statistics = result.statistics
        statistics.total_clients = len(records)

        logger.info(
            f"Filtering {statistics.total_clients:,} clients "
            f"(policy={self.config.policy.value})"
        )

        kept = []
        for client in records:
            decision = self.validator.evaluate(client)
            statistics.record(decision)
            if decision.is_kept:
                kept.append(decision.kept)

        result.records = self.entity_filter.filter_clients(kept)

        logger.info(
            f"Kept {statistics.success_count:,} clients, "
            f"skipped {statistics.skipped_clients_count:,} clients and "
            f"{statistics.skipped_pregnancies_count:,} pregnancies"
        )
        return result


@dataclass
class JobResult:
    """Result of a file run."""
    success: bool
    input_path: str = ""
    output_path: str = ""
    report_path: str = ""
    skipped_csv_path: Optional[str] = None
    statistics: Optional[FilterStatistics] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    peak_memory_mb: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "success": self.success,
            "input_path": self.input_path,
            "output_path": self.output_path,
            "report_path": self.report_path,
            "skipped_csv_path": self.skipped_csv_path,
            "statistics": self.statistics.to_dict() if self.statistics else None,
            "duration_seconds": (
                (self.end_time - self.start_time).total_seconds()
                if self.start_time and self.end_time else None
            ),
            "peak_memory_mb": round(self.peak_memory_mb, 1),
        }


class FilterJob:
    """
    Runs the filter over files.

    Steps:
    1. Read input JSON (root must be an array)
    2. Validate and filter clients
    3. Stage output JSON, results.txt and the optional skip CSV, then move
       them into place together

    Fatal errors (unreadable input, invalid JSON, wrong root type, unwritable
    output) propagate to the caller; in that case no output file is created.
    """

    def __init__(self, config: Config, monitor: Optional[MemoryMonitor] = None):
        self.config = config
        self.pipeline = FilterPipeline(config)
        self.monitor = monitor or MemoryMonitor()

    def run(
        self,
        input_path: str,
        output_path: str,
        skipped_csv_path: Optional[str] = None,
        run_date: Optional[datetime] = None
    ) -> JobResult:
        """
        Execute the job.

        Args:
            input_path: Input JSON file
            output_path: Destination of the filtered dataset
            skipped_csv_path: Optional destination of the skip-entry CSV
            run_date: Timestamp printed in the report (defaults to now)

        Returns:
            JobResult describing the run
        """
        from reader.json_reader import JsonRecordReader
        from writer.csv_writer import SkippedEntriesCSVWriter
        from writer.json_writer import JsonWriter
        from writer.report import ReportWriter, report_path_for
        from writer.staging import StagedWriter

        result = JobResult(success=False, input_path=input_path, output_path=output_path)
        result.start_time = datetime.now(timezone.utc)
        result.report_path = report_path_for(output_path)

        # Step 1: Read data
        logger.info("=" * 60)
        logger.info("Step 1: Reading input data")
        logger.info("=" * 60)

        records = JsonRecordReader(input_path).read()
        self.monitor.checkpoint("after read")

        # Step 2: Filter
        logger.info("=" * 60)
        logger.info("Step 2: Validating and filtering clients")
        logger.info("=" * 60)

        pipeline_result = self.pipeline.run(records)
        result.statistics = pipeline_result.statistics
        self.monitor.checkpoint("after filter")

        # Step 3: Write outputs
        logger.info("=" * 60)
        logger.info("Step 3: Writing output")
        logger.info("=" * 60)

        staged = StagedWriter()
        try:
            staged.stage(output_path, JsonWriter().render(pipeline_result.records))
            staged.stage(
                result.report_path,
                ReportWriter(self.config.policy).render(pipeline_result.statistics, run_date),
            )
            if skipped_csv_path:
                staged.stage(skipped_csv_path, SkippedEntriesCSVWriter().render(pipeline_result.statistics))
            for path in staged.commit():
                logger.info(f"Wrote {path}")
        finally:
            staged.discard()

        result.skipped_csv_path = skipped_csv_path
        self.monitor.checkpoint("after write")

        result.success = True
        result.end_time = datetime.now(timezone.utc)
        result.peak_memory_mb = self.monitor.peak_rss_mb
        logger.debug(self.monitor.summary())

        logger.info("Filter job completed successfully")
        return result
