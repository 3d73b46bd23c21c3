"""Run statistics accumulated by the filter pipeline."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from core.validation import ClientDecision, SkippedClient, SkippedPregnancy


@dataclass
class FilterStatistics:
    """
    Counts and skip lists of one run.

    Counts of skipped entries are derived from the lists, so
    ``success_count + skipped_clients_count == total_clients`` holds for
    every completed run.
    """
    total_clients: int = 0
    success_count: int = 0
    skipped_clients: List[SkippedClient] = field(default_factory=list)
    skipped_pregnancies: List[SkippedPregnancy] = field(default_factory=list)

    @property
    def skipped_clients_count(self) -> int:
        return len(self.skipped_clients)

    @property
    def skipped_pregnancies_count(self) -> int:
        return len(self.skipped_pregnancies)

    def record(self, decision: ClientDecision) -> None:
        """Account for one evaluated client."""
        self.skipped_pregnancies.extend(decision.skipped_pregnancies)
        if decision.is_kept:
            self.success_count += 1
        elif decision.skipped_client is not None:
            self.skipped_clients.append(decision.skipped_client)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "totalClients": self.total_clients,
            "successCount": self.success_count,
            "skippedClientsCount": self.skipped_clients_count,
            "skippedClients": [s.to_dict() for s in self.skipped_clients],
            "skippedPregnanciesCount": self.skipped_pregnancies_count,
            "skippedPregnancies": [s.to_dict() for s in self.skipped_pregnancies],
        }
