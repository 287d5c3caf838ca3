"""Custom exceptions for the OpenSIPS exporter.

Catalog and registration errors are raised while the exporter is being
assembled and are meant to stop startup. A label mismatch is raised at
emit time and indicates a broken catalog, so it is never caught inside
the package.
"""

from typing import Optional, Sequence


class ExporterError(Exception):
    """Base exception for all exporter errors."""

    pass


class ConfigurationError(ExporterError):
    """Raised for invalid configuration values or unreadable config files."""

    pass


class StatisticError(ExporterError):
    """Raised when a raw statistic cannot be interpreted."""

    def __init__(self, full_name: str, message: Optional[str] = None):
        self.full_name = full_name
        super().__init__(message or f"Malformed statistic name: {full_name!r}")


class CatalogError(ExporterError):
    """Raised when a metric catalog is internally inconsistent."""

    def __init__(self, subsystem: str, message: str):
        self.subsystem = subsystem
        super().__init__(f"Catalog '{subsystem}': {message}")


class RegistrationError(ExporterError):
    """Raised when a processor cannot be registered under a key."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Cannot register processor for '{key}': {message}")


class LabelMismatchError(ExporterError):
    """Raised when label values do not match a descriptor's label names."""

    def __init__(
        self,
        metric_name: str,
        label_names: Sequence[str],
        label_values: Sequence[str],
    ):
        self.metric_name = metric_name
        self.label_names = tuple(label_names)
        self.label_values = tuple(label_values)
        super().__init__(
            f"Metric {metric_name} declares {len(self.label_names)} label(s) "
            f"{list(self.label_names)} but got {len(self.label_values)} value(s) "
            f"{list(self.label_values)}"
        )
