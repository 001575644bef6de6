import json
import re
import sys
from typing import Iterable, List

# Numbers may be separated by whitespace and/or commas
_SPLIT_RE = re.compile(r"[\s,]+")


def parse_values(lines: Iterable[str]) -> List[float]:
    """
    Returns every number found in ``lines``.
    A line holding a JSON array is read as a list of numbers; otherwise the
    line is split on whitespace/commas. Blank lines and '#' comments are skipped.
    """
    values: List[float] = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue

        # Try JSON
        if line.startswith("[") and line.endswith("]"):
            try:
                arr = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"line {lineno}: invalid JSON array: {exc}") from exc
            for item in arr:
                if isinstance(item, bool) or not isinstance(item, (int, float)):
                    raise ValueError(f"line {lineno}: not a number: {item!r}")
                values.append(float(item))
            continue

        for token in _SPLIT_RE.split(line):
            if not token:
                continue
            try:
                values.append(float(token))
            except ValueError:
                raise ValueError(f"line {lineno}: not a number: {token!r}") from None
    return values


def read_values(path: str) -> List[float]:
    """Read numbers from ``path`` ('-' reads stdin)."""
    if path == "-":
        return parse_values(sys.stdin)
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        return parse_values(handle)


__all__ = ["parse_values", "read_values"]
