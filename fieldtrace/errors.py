# fieldtrace/errors.py
"""Error taxonomy surfaced at the simulator boundary."""

from __future__ import annotations
from typing import Any, Dict, Optional


class FieldTraceError(Exception):
    """Base error carrying a context dict for diagnostics."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.context = context or {}
        self.cause = cause


class ConfigurationError(FieldTraceError, ValueError):
    """Invalid simulation parameters, rejected before grid initialization."""

    def __init__(self, message: str, parameter: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if parameter:
            context["parameter"] = parameter
        super().__init__(message, context=context, **kwargs)
        self.parameter = parameter


class SinkWriteError(FieldTraceError, OSError):
    """The output sink became unwritable; fatal to the run."""

    def __init__(self, message: str, records_written: int = 0, **kwargs):
        context = kwargs.pop("context", {})
        context["records_written"] = records_written
        super().__init__(message, context=context, **kwargs)
        self.records_written = records_written


class TrajectoryFormatError(FieldTraceError, ValueError):
    """A trajectory stream does not match the expected record layout."""

    def __init__(self, message: str, line_number: Optional[int] = None, **kwargs):
        context = kwargs.pop("context", {})
        if line_number is not None:
            context["line_number"] = line_number
        super().__init__(message, context=context, **kwargs)
        self.line_number = line_number
