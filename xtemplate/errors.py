"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from XTemplateUserError.

Programming errors and bugs should NOT inherit from XTemplateUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class XTemplateUserError(Exception):
    """
    Base class for all user-facing errors in xtemplate.

    These errors indicate problems that the user can fix:
    configuration issues, unreadable templates or data, etc.
    """
    pass


class ConfigError(XTemplateUserError):
    """Invalid render configuration (unknown keys, bad renderer references)."""
    pass


class TemplateSetupError(XTemplateUserError):
    """
    The one-time document preparation failed.

    Aborts the whole render; surfaced through ``RenderResult.error``.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


__all__ = ["XTemplateUserError", "ConfigError", "TemplateSetupError"]
