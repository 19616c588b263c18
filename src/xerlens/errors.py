"""Error types for export parsing and configuration."""

from __future__ import annotations


class XerError(Exception):
    """Base class for all xerlens errors."""


class MissingTableError(XerError):
    """A table the schema mapper cannot do without is absent.

    Attributes:
        table_name: Name of the missing table (e.g. ``"PROJECT"``).
        available: Table names that were present in the export.
    """

    def __init__(self, table_name: str, available: list[str] | None = None) -> None:
        self.table_name = table_name
        self.available = available or []
        msg = f"not a valid export: no {table_name} table found"
        if self.available:
            msg += f". Tables present: {self.available}"
        super().__init__(msg)


class ConfigError(XerError):
    """Invalid ``xerlens.yaml`` configuration.

    Attributes:
        path: Path of the offending config file.
    """

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Invalid config {path}: {message}")
