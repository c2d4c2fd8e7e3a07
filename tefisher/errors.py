# tefisher/errors.py
from __future__ import annotations

__all__ = [
    "TeFisherError",
    "ConfigurationError",
    "FamilyProcessingError",
    "FisherRunError",
    "FisherReportError",
    "DataQualityWarning",
]


class TeFisherError(Exception):
    """Base class for everything raised on purpose by tefisher."""


class ConfigurationError(TeFisherError):
    """Missing inputs, missing executable, empty chromosome set. Fatal."""


class FamilyProcessingError(TeFisherError):
    """One family could not be tested. The driver recovers and moves on."""


class FisherRunError(FamilyProcessingError):
    pass


class FisherReportError(FamilyProcessingError):
    pass


class DataQualityWarning(UserWarning):
    pass
