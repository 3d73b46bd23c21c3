"""
Memory monitoring for the filter job.

The whole dataset is held in memory for the duration of a run, so memory is
the one resource worth watching. Records process RSS and system memory at
named checkpoints (after loading, after filtering, after writing).
"""

import logging
from typing import Any, Dict

import psutil

logger = logging.getLogger(__name__)


_MB = 1024 ** 2
_GB = 1024 ** 3


class MemoryMonitor:
    """
    Track memory usage of the current process across a job.

    Each checkpoint stores the process resident set size together with the
    system-wide used/available memory reported by psutil.
    """

    def __init__(self):
        self._process = psutil.Process()
        self._checkpoints: Dict[str, Dict[str, Any]] = {}

    def checkpoint(self, label: str) -> Dict[str, float]:
        """
        Log current memory usage.

        Args:
            label: Description of current checkpoint

        Returns:
            Dict with memory statistics (MB, GB and %)
        """
        rss_mb = self._process.memory_info().rss / _MB
        vm = psutil.virtual_memory()

        stats = {
            'label': label,
            'rss_mb': rss_mb,
            'used_gb': vm.used / _GB,
            'total_gb': vm.total / _GB,
            'percent': vm.percent,
            'available_gb': vm.available / _GB,
        }

        logger.info(
            f"[MEMORY] {label}: process={rss_mb:.1f} MB, "
            f"system={stats['used_gb']:.2f}/{stats['total_gb']:.2f} GB ({vm.percent:.1f}%), "
            f"available={stats['available_gb']:.2f} GB"
        )

        self._checkpoints[label] = stats
        return stats

    @property
    def checkpoints(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._checkpoints)

    @property
    def peak_rss_mb(self) -> float:
        """Highest process RSS seen at any checkpoint."""
        if not self._checkpoints:
            return 0.0
        return max(stats['rss_mb'] for stats in self._checkpoints.values())

    def summary(self) -> str:
        """
        Generate summary of all checkpoints.

        Returns:
            Formatted summary string
        """
        if not self._checkpoints:
            return "No memory checkpoints recorded"

        lines = [
            "=" * 60,
            "Memory Monitoring Summary",
            "=" * 60,
            ""
        ]

        for label, stats in self._checkpoints.items():
            lines.append(f"{label}:")
            lines.append(f"  Process: {stats['rss_mb']:.1f} MB")
            lines.append(f"  System used: {stats['used_gb']:.2f} GB ({stats['percent']:.1f}%)")
            lines.append(f"  Available: {stats['available_gb']:.2f} GB")
            lines.append("")

        lines.append("=" * 60)
        return "\n".join(lines)
