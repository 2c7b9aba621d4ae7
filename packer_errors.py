"""
Exceptions raised past the packer pipeline.

Line and item problems never raise: they are reported as rejection reasons
(see packer_types) and absorbed by the pipeline.
"""


class SourceUnavailable(OSError):
    """Raised when the input file cannot be opened, read or decoded."""


class SettingsError(ValueError):
    """Raised when a settings file or payload violates the expected schema."""
