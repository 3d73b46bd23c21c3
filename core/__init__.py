"""
Pregnancy Record Filter
=======================
Removes personal and non-statistical fields from hierarchical pregnancy
datasets while keeping their nested structure.

Pipeline:
- Validate clients and pregnancies (strict or salvage policy)
- Project every entity onto its property whitelist
- Project data_encr blobs onto per-type allow-lists (plus per-child patterns)
- Report what was skipped and why
"""

__version__ = "1.0.0"

from .config import (
    Config,
    DataEncrConfig,
    RequiredFieldsConfig,
    ValidationConfig,
    ValidationPolicy,
    WhitelistConfig,
)
from .pipeline import FilterJob, FilterPipeline, JobResult, PipelineResult
from .statistics import FilterStatistics

__all__ = [
    # Config
    "Config", "WhitelistConfig", "DataEncrConfig", "RequiredFieldsConfig",
    "ValidationConfig", "ValidationPolicy",
    # Pipeline
    "FilterPipeline", "PipelineResult", "FilterJob", "JobResult", "FilterStatistics",
]
