"""
purlwise: row-by-row knitting instructions.

    calculate_row   one row of a periodic stitch pattern
    synthesize      one marker-relative shaping row
    route           one row of an authored step, whichever generator fits
"""

from purlwise.patterns.calculator import calculate_row
from purlwise.router.router import route
from purlwise.shaping.synthesizer import synthesize

__all__ = ["calculate_row", "route", "synthesize"]
