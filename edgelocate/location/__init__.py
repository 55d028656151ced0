"""Location extraction, scoring and enhancement."""

from .enhancement import enhance_location, needs_enhancement
from .headers import extract_location
from .quality import score_headers, score_record

__all__ = [
    "enhance_location",
    "extract_location",
    "needs_enhancement",
    "score_headers",
    "score_record",
]
