"""
Status code pattern matching for HTTP checks.

Grammar: a comma-separated list of segments, each either a single integer
("200") or an inclusive dash-separated range ("100-200"). Ranges may
overlap. A code matches if it equals a singleton or falls in a range.

    >>> StatusCodePattern.parse("200-204,300-305").matches(301)
    True
"""

from dataclasses import dataclass

from checkmate.checks.exceptions import StatusCodePatternError


def _to_int(bound: str, pattern: str) -> int:
    try:
        return int(bound.strip())
    except ValueError:
        raise StatusCodePatternError(
            f"Can't convert {bound!r} to integer", pattern
        ) from None


@dataclass(frozen=True)
class StatusCodePattern:
    """Parsed status code pattern: a tuple of inclusive (low, high) ranges."""

    pattern: str
    ranges: tuple[tuple[int, int], ...]

    @classmethod
    def parse(cls, pattern: str) -> "StatusCodePattern":
        """
        Parse a pattern string.

        Raises:
            StatusCodePatternError: Non-integer bound, left bound greater
                than right bound, or more than one dash in a segment
        """
        ranges: list[tuple[int, int]] = []
        for segment in pattern.split(","):
            bounds = segment.split("-")
            if len(bounds) == 1:
                value = _to_int(bounds[0], pattern)
                ranges.append((value, value))
            elif len(bounds) == 2:
                left = _to_int(bounds[0], pattern)
                right = _to_int(bounds[1], pattern)
                if left > right:
                    raise StatusCodePatternError(
                        f"Left bound {left} is greater than right bound {right}", pattern
                    )
                ranges.append((left, right))
            else:
                raise StatusCodePatternError("Too many dashes in range pattern", pattern)
        return cls(pattern=pattern, ranges=tuple(ranges))

    def matches(self, code: int) -> bool:
        return any(low <= code <= high for low, high in self.ranges)


def check_status_code(pattern: str, code: int) -> bool:
    """
    Parse `pattern` and test `code` against it.

    Raises:
        StatusCodePatternError: If the pattern doesn't parse
    """
    return StatusCodePattern.parse(pattern).matches(code)
