"""
Exception hierarchy for pytrackseg.

Only failures that must abort a run are exceptions. An empty trace is a valid
input everywhere unless the caller asks for points explicitly, and a zero time
step between two samples resolves to zero speed instead of raising.
"""


class PyTrackSegError(Exception):
    """Base class for all pytrackseg errors."""


class TraceParseError(PyTrackSegError):
    """The input trace is missing, unreadable or not valid GPX."""


class EmptyTraceError(PyTrackSegError):
    """The trace holds no samples but the caller requires at least one."""


class TraceExportError(PyTrackSegError):
    """A derived sequence could not be serialised or written."""
