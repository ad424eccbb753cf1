"""
BaseForge Kernel: Errors

One exception per failure class. Only ValidationError is meant to reach a
user; the others are caught at the seam that owns the fallback.
"""

from __future__ import annotations


class BaseForgeError(Exception):
    """Base class for all kernel errors."""
    pass


class ValidationError(BaseForgeError):
    """A required value is missing or malformed. The operation was aborted with no mutation."""
    pass


class ResolutionError(BaseForgeError):
    """A table, field or row id did not resolve."""
    pass


class ExternalServiceError(BaseForgeError):
    """The assistant provider call failed."""
    pass


class ProtocolParseError(BaseForgeError):
    """Assistant text held no parseable, valid command payload."""
    pass
