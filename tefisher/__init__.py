# tefisher/__init__.py
from .errors import (
    TeFisherError,
    ConfigurationError,
    FamilyProcessingError,
    FisherRunError,
    FisherReportError,
    DataQualityWarning,
)
from .formats.bed import IntervalRecord
from .formats.fisher_report import FisherTable
from .models.family import MIN_FAMILY_SIZE, partition_by_family, sanitize_family_name
from .models.result import FamilyResult, ErrorResult

# Convenience re-exports for direct functional use
from .enrichment import EnrichmentOptions, run_enrichment
from .runners.bedtools import BedtoolsFisher, BedtoolsFisherOptions, RawReport
from .report import write_report

__version__ = "0.1.0"
