"""
=============================================================================
CALCULATION HANDLER
=============================================================================

GET /calc?a=3&b=4 adds two non-negative integers:

    <html><body>
    <h1>Sum</h1>
    <p>The sum of 3 and 4 is 7</p>
    </body></html>

=============================================================================
QUERY MATCHING
=============================================================================

The path must match this pattern in full:

    .*[?&]a=(\\d+)&b=(\\d+).*
      ─┬──  ──┬──  ──┬──
       │      │      └── b: one or more digits, directly after "&"
       │      └── a: one or more digits
       └── "a=" starts right after "?" or "&"

    /calc?a=3&b=4           → 3, 4
    /calc?x=1&a=3&b=4&y=2   → 3, 4
    /calc?b=4&a=3           → 400 (a must come first)
    /calc?a=3               → 400
    /calc?a=-3&b=4          → 400 (digits only, no sign)
    /calc?a=3.5&b=4         → 400

=============================================================================
OVERFLOW
=============================================================================

Python integers never overflow, so the limit is explicit: operands AND
the sum must fit in a signed 64-bit integer. Anything bigger is a 400,
never a wrapped or truncated result.

    INT64_MAX = 2**63 - 1 = 9223372036854775807

=============================================================================
"""

import re
from typing import Optional

from ..http.response import HTTPResponse, bad_request, html


CALC_PATTERN = re.compile(r".*[?&]a=(\d+)&b=(\d+).*", re.ASCII)

INT64_MAX = 2 ** 63 - 1

# Longest digit run worth converting; anything longer is out of range anyway.
_MAX_DIGITS = len(str(INT64_MAX))


class CalcHandler:
    """Handler for the /calc endpoint."""

    def handle(self, path: str) -> HTTPResponse:
        operands = parse_operands(path)
        if operands is None:
            return bad_request()

        a, b = operands
        total = a + b
        if total > INT64_MAX:
            return bad_request()

        return html(
            "<html><body>\n"
            "<h1>Sum</h1>\n"
            f"<p>The sum of {a} and {b} is {total}</p>\n"
            "</body></html>\n"
        )


def parse_operands(path: str) -> Optional[tuple[int, int]]:
    """
    Extract the a and b operands from a /calc path.

    Returns:
        (a, b), or None if the query does not match or a value is out of
        the signed 64-bit range.

    Examples:
        >>> parse_operands("/calc?a=3&b=4")
        (3, 4)
        >>> parse_operands("/calc?a=3") is None
        True
    """
    match = CALC_PATTERN.fullmatch(path)
    if not match:
        return None

    values = []
    for digits in match.groups():
        # int() refuses very long strings, leading zeros included
        digits = digits.lstrip("0") or "0"
        if len(digits) > _MAX_DIGITS:
            return None
        value = int(digits)
        if value > INT64_MAX:
            return None
        values.append(value)

    return values[0], values[1]
