"""URL path normalization.

Turns concrete request paths into reusable templates so that requests to the
same endpoint group together::

    >>> extract("/pharmacy/request/3191/reject")
    '/pharmacy/request/{integer}/reject'
"""
import re

from ..utils.constants import INTEGER_PLACEHOLDER, REGEX_PATTERNS, UUID_PLACEHOLDER

# re.ASCII keeps \d to 0-9; unicode digits are left alone
INTEGER_RE = re.compile(REGEX_PATTERNS["integer"], re.ASCII)
UUID_RE = re.compile(REGEX_PATTERNS["uuid"])


def normalize_segment(segment: str) -> str:
    """Return the placeholder for a variable segment, or the segment itself"""
    if INTEGER_RE.fullmatch(segment):
        return INTEGER_PLACEHOLDER
    if UUID_RE.fullmatch(segment):
        return UUID_PLACEHOLDER
    return segment


def extract(path: str) -> str:
    """Normalize a URL path into a template.

    Numeric segments become ``{integer}`` and UUID segments become ``{uuid}``.
    Empty segments from leading, trailing or repeated slashes are kept, and
    nothing else is altered: no case folding, no percent-decoding.

    Args:
        path: Request path

    Returns:
        Path template
    """
    return "/".join(normalize_segment(segment) for segment in path.split("/"))
