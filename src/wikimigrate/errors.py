"""Exception hierarchy for wikimigrate.

INVARIANT: Only :class:`InvalidArgumentError` escapes to callers of the
registry API. Every per-file error raised during a migration batch is
converted into a ``FileFailure`` entry on the run's result.
"""

from __future__ import annotations


class MigrationError(Exception):
    """Base class for all wikimigrate errors."""


class InvalidArgumentError(MigrationError, ValueError):
    """A blank title or slug was passed to the title registry."""


class ParseFailure(MigrationError):
    """A file could not be parsed into any document."""


class ConversionFailure(MigrationError):
    """Markup conversion raised for a document."""


class WriteFailure(MigrationError):
    """The writer could not persist a converted document."""
