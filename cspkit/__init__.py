"""Build, validate and parse Content-Security-Policy headers."""

from cspkit.errors import CspError, InvalidArgument, InvalidDirective, InvalidSourceListItem
from cspkit.models import Mode, OutputMode, ParseOptions
from cspkit.parser import CspParser
from cspkit.policy import ContentSecurityPolicy

__all__ = [
    "ContentSecurityPolicy",
    "CspError",
    "CspParser",
    "InvalidArgument",
    "InvalidDirective",
    "InvalidSourceListItem",
    "Mode",
    "OutputMode",
    "ParseOptions",
]
