"""Exceptions raised while reading codebuild.c and its configuration."""


class CodebuildError(Exception):
    """Base class for all glcdCat errors."""


class SchemaDriftError(CodebuildError):
    """The upstream source no longer matches the layout the parser expects.

    This is never recoverable for a single record: the whole parse is aborted
    and no partial model is returned.
    """

    def __init__(self, message: str, fragment: str = None):
        super().__init__(message)
        self.fragment = fragment

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.fragment:
            return f"{base_msg} (near: {self.fragment[:60]!r})"
        return base_msg


class ConfigError(CodebuildError):
    """A configuration file could not be read or failed validation."""
