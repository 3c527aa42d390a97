from .formatting import (
    capitalize_first,
    collapse_blocks,
    expand_abbreviations,
    format_repeat,
    plural,
    stitch_change_suffix,
    strip_row_prefix,
    times_text,
)

__all__ = [
    "plural",
    "times_text",
    "format_repeat",
    "collapse_blocks",
    "stitch_change_suffix",
    "strip_row_prefix",
    "capitalize_first",
    "expand_abbreviations",
]
