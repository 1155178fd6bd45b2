"""Turn free-text completions into strictly typed JSON values.

The research provider is asked for bare JSON but routinely wraps it in
prose, code fences or typographic punctuation. Cleanup happens in a fixed
order:

1. strip code fence markers
2. escape forward slashes inside URLs (``\\/`` is a valid JSON escape)
3. strip ``//`` comments up to the end of the line
4. map Unicode punctuation, spacing and symbols through one ordered table
5. drop anything that is not printable ASCII
6. collapse whitespace

and then the first object or array span is sliced out and parsed.
"""

import json
import re
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

from ..errors import MalformedResponse


class ResponseShape(str, Enum):
    """Top-level JSON shape a caller expects."""

    OBJECT = "object"
    ARRAY = "array"


# (description, code point ranges, replacement). The first rule that claims
# a code point wins, so specific mappings come before the blanket removals.
NORMALIZATION_RULES: Sequence[Tuple[str, Sequence[Tuple[int, int]], str]] = (
    ("zero-width marks", ((0x200B, 0x200D), (0x2060, 0x2064), (0xFEFF, 0xFEFF)), ""),
    ("dashes and minus signs", ((0x2010, 0x2015), (0x2212, 0x2212), (0xFE58, 0xFE58), (0xFE63, 0xFE63), (0xFF0D, 0xFF0D)), "-"),
    ("double quotes", ((0x201C, 0x201F), (0xFF02, 0xFF02)), '"'),
    ("single quotes", ((0x2018, 0x201B), (0xFF07, 0xFF07)), "'"),
    ("division slash", ((0x2215, 0x2215),), "/"),
    ("spaces and direction marks", ((0x00A0, 0x00A0), (0x2000, 0x200A), (0x200E, 0x200F), (0x2028, 0x202F), (0x205F, 0x205F), (0x3000, 0x3000)), " "),
    ("latin-1 symbols", ((0x00A2, 0x00A9), (0x00AB, 0x00AC), (0x00AE, 0x00B1), (0x00B4, 0x00B8), (0x00BB, 0x00BE)), ""),
    ("modifier letters and combining marks", ((0x02B0, 0x036F), (0x20D0, 0x20FF), (0xFE20, 0xFE2F)), ""),
    ("general punctuation", ((0x2016, 0x2017), (0x2020, 0x2027), (0x2030, 0x205E), (0x2065, 0x206F)), ""),
    ("currency symbols", ((0x20A0, 0x20CF),), ""),
    ("letterlike symbols and number forms", ((0x2100, 0x218F),), ""),
    ("arrows, math and technical symbols", ((0x2190, 0x23FF),), ""),
    ("control pictures and enclosed alphanumerics", ((0x2400, 0x24FF),), ""),
    ("miscellaneous symbols and dingbats", ((0x2600, 0x27BF),), ""),
    ("supplemental and CJK punctuation", ((0x2E00, 0x2E7F), (0x3001, 0x303F)), ""),
    ("variation selectors and presentation forms", ((0xFE00, 0xFE0F), (0xFE30, 0xFE57), (0xFE59, 0xFE62), (0xFE64, 0xFEFE)), ""),
    ("specials", ((0xFFF0, 0xFFFF),), ""),
)


def _build_translation_table(rules) -> Dict[int, str]:
    table: Dict[int, str] = {}
    for _description, ranges, replacement in rules:
        for start, end in ranges:
            for code_point in range(start, end + 1):
                table.setdefault(code_point, replacement)
    return table


_TRANSLATION_TABLE = _build_translation_table(NORMALIZATION_RULES)

_FENCE_RE = re.compile(r"```json|```", re.IGNORECASE)
_URL_RE = re.compile(r"https?://[^\"\s]+")
_COMMENT_RE = re.compile(r"\s*//.*$", re.MULTILINE)
_LINE_BREAK_RE = re.compile(r"[\r\n\t]+")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7E]")
_WHITESPACE_RE = re.compile(r"\s{2,}")
_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


def normalize_unicode(text: str) -> str:
    """Map typographic Unicode characters to ASCII or drop them."""
    return text.translate(_TRANSLATION_TABLE)


def normalize_completion_text(text: str) -> str:
    """Clean a raw completion so that embedded JSON can be parsed.

    Args:
        text: Raw completion text

    Returns:
        Single-line printable ASCII text
    """
    cleaned = _FENCE_RE.sub("", text).strip()
    cleaned = _URL_RE.sub(lambda match: match.group(0).replace("/", "\\/"), cleaned)
    cleaned = _COMMENT_RE.sub("", cleaned)
    cleaned = normalize_unicode(cleaned)
    cleaned = _LINE_BREAK_RE.sub(" ", cleaned)
    cleaned = _NON_PRINTABLE_RE.sub("", cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned)


def _slice_object(cleaned: str) -> str:
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        raise MalformedResponse("No valid JSON objects found in the content")
    return cleaned[start:end + 1]


def _slice_array(cleaned: str) -> str:
    match = _ARRAY_RE.search(cleaned)
    if not match:
        raise MalformedResponse("No valid JSON array found in the content")
    return match.group(0)


def extract_json(text: str, shape: ResponseShape) -> Any:
    """Parse the JSON value of the given shape out of a completion.

    Args:
        text: Raw completion text
        shape: Expected top-level shape

    Returns:
        A dict for OBJECT, a list for ARRAY

    Raises:
        MalformedResponse: No delimiters found, invalid JSON or wrong shape
    """
    cleaned = normalize_completion_text(text)
    fragment = _slice_object(cleaned) if shape == ResponseShape.OBJECT else _slice_array(cleaned)

    try:
        value = json.loads(fragment)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Invalid JSON {shape.value} response from AI: {e}") from e

    expected = dict if shape == ResponseShape.OBJECT else list
    if not isinstance(value, expected):
        raise MalformedResponse(f"Expected a JSON {shape.value}, got {type(value).__name__}")
    return value


def extract_object(text: str) -> Dict[str, Any]:
    """Parse a JSON object out of a completion."""
    return extract_json(text, ResponseShape.OBJECT)


def extract_array(text: str) -> List[Any]:
    """Parse a JSON array out of a completion."""
    return extract_json(text, ResponseShape.ARRAY)
