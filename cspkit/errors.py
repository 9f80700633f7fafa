"""Typed failures raised by the policy engine."""

from __future__ import annotations


class CspError(Exception):
    """Base class for every policy construction or parsing failure."""


class InvalidArgument(CspError, ValueError):
    """Malformed construction parameters (unknown mode, bad options)."""


class InvalidDirective(CspError):
    """Directive name is not part of the directive registry."""

    def __init__(self, directive: str) -> None:
        self.directive = directive
        super().__init__(f'"{directive}" is not a valid directive')


class InvalidSourceListItem(CspError):
    """Value is not allowed for the directive it was added to."""

    def __init__(self, value: str, directive: str, pattern: str | None = None) -> None:
        self.value = value
        self.directive = directive
        self.pattern = pattern
        message = f'"{value}" is not a valid source list item for directive "{directive}"'
        if pattern is not None:
            message = f"{message} {pattern}"
        super().__init__(message)
