"""Policy modes and pydantic models for construction options."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError

from cspkit.errors import InvalidArgument


class Mode(str, Enum):
    """Validation strictness: STRICT rejects bad quoted tokens, LOOSE drops them."""

    STRICT = "strict"
    LOOSE = "loose"


class OutputMode(str, Enum):
    """Rendering of a policy: full ``Name: value`` header or value only."""

    FULL_HEADER = "full_header"
    VALUE_ONLY = "value_only"


def coerce_mode(value: Any) -> Mode:
    try:
        return Mode(value)
    except ValueError:
        raise InvalidArgument(f"Invalid mode specified: {value!r}") from None


def coerce_output_mode(value: Any) -> OutputMode:
    try:
        return OutputMode(value)
    except ValueError:
        raise InvalidArgument(f"Invalid output mode specified: {value!r}") from None


class ParseOptions(BaseModel):
    """Options accepted by ``ContentSecurityPolicy.from_string``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    mode: Mode = Mode.STRICT

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> ParseOptions:
        """Validate a plain options mapping, raising InvalidArgument on bad input."""
        if options is None:
            return cls()
        if isinstance(options, ParseOptions):
            return options
        try:
            return cls.model_validate(dict(options))
        except (ValidationError, TypeError, ValueError) as exc:
            raise InvalidArgument(f"Invalid options: {exc}") from exc
