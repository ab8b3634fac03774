"""Parsers for the value grammars accepted on the command line.

Grammars (keywords and separators are case-insensitive)::

    rotation     := [front-clause] [down-clause]      clauses may appear anywhere
    front-clause := "Front" WS+ numeral
    down-clause  := ["-"] "Down" WS+ numeral
    numeral      := ["+" | "-"] DIGIT+ ["." DIGIT*]

    frame-range  := DIGIT+ "-" DIGIT+
    resolution   := DIGIT+ ("x" | "X") DIGIT+
    boolean      := "true" | <anything else, meaning false>
    export-type  := "6processed"

Rotation is the only grammar with a fatal failure: a clause whose keyword is
present but whose numeral is malformed raises ArgumentError. Missing clauses
default to 0.0. The other grammars return None on malformed input so the
caller can warn and keep its default.
"""

import math
import re

from .errors import ArgumentError

# A clause is recognised by its keyword followed by a numeral-like run of
# characters; the run is validated against _NUMERAL afterwards.
_FRONT_CLAUSE = re.compile(r"\bfront\s+([-+]?[.\d]+)", re.IGNORECASE)
_DOWN_CLAUSE = re.compile(r"-?\bdown\s+([-+]?[.\d]+)", re.IGNORECASE)
_NUMERAL = re.compile(r"[-+]?\d+(?:\.\d*)?")

_FRAME_RANGE = re.compile(r"\s*(\d+)\s*-\s*(\d+)\s*")
_RESOLUTION = re.compile(r"\s*(\d+)\s*[xX]\s*(\d+)\s*")

SIX_CAMERA_EXPORT_TYPE = "6processed"


def _parse_numeral(clause: str, text: str) -> float:
    if not _NUMERAL.fullmatch(text):
        raise ArgumentError(f"Invalid {clause} rotation value {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ArgumentError(f"{clause} rotation value {text!r} is out of range")
    return value


def parse_rotation(text: str) -> tuple[float, float]:
    """Parse a rotation string such as ``"Front 5 -Down 0"``.

    Args:
        text: Rotation string.

    Returns:
        Tuple of (front, down) in degrees. A missing clause yields 0.0.

    Raises:
        ArgumentError: If a clause is present but its numeral is malformed.
    """
    front = 0.0
    down = 0.0

    match = _FRONT_CLAUSE.search(text)
    if match:
        front = _parse_numeral("Front", match.group(1))

    match = _DOWN_CLAUSE.search(text)
    if match:
        down = _parse_numeral("Down", match.group(1))

    return front, down


def parse_frame_range(text: str) -> tuple[int, int] | None:
    """Parse ``"start-end"`` into a pair of frame indices, or None if malformed."""
    match = _FRAME_RANGE.fullmatch(text)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def parse_resolution(text: str) -> tuple[int, int] | None:
    """Parse ``"WIDTHxHEIGHT"`` into a positive (width, height), or None."""
    match = _RESOLUTION.fullmatch(text)
    if not match:
        return None
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        return None
    return width, height


def parse_bool(text: str) -> bool:
    """Only a case-insensitive ``"true"`` is true."""
    return text.strip().lower() == "true"


def parse_export_type(text: str) -> bool | None:
    """Return True for the six-camera export type, None if unrecognised."""
    if text.strip().lower() == SIX_CAMERA_EXPORT_TYPE:
        return True
    return None


def parse_int(flag: str, text: str) -> int:
    """Parse an integer option value.

    Raises:
        ArgumentError: If ``text`` is not an integer.
    """
    try:
        return int(text.strip())
    except ValueError:
        raise ArgumentError(f"Invalid integer for {flag}: {text!r}") from None


def parse_float(flag: str, text: str) -> float:
    """Parse a finite floating point option value.

    Raises:
        ArgumentError: If ``text`` is not a finite number.
    """
    try:
        value = float(text.strip())
    except ValueError:
        raise ArgumentError(f"Invalid number for {flag}: {text!r}") from None
    if not math.isfinite(value):
        raise ArgumentError(f"Invalid number for {flag}: {text!r}")
    return value
