"""
Conversion of decoded log records into JSON‑safe documents.

Records arrive from the chunk decoder as arbitrary nested values: mappings
whose keys are not guaranteed to be strings, sequences, raw byte buffers and
scalars.  :func:`normalize` walks such a value and returns the canonical
shape accepted by the document store:

* every mapping key is a ``str`` (anything else is rejected, never coerced),
* every byte buffer is decoded to text,
* sequences become lists with order and length preserved,
* scalars are returned unchanged,
* nesting deeper than ``MAX_NESTING_DEPTH`` is rejected.

The function is pure and may be called concurrently for different records.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Union

from cloudant_output_lib.exceptions import (
    NestingTooDeepError,
    NonStringKeyError,
    UnsupportedValueError,
)

NormalizedValue = Union[
    Dict[str, "NormalizedValue"], List["NormalizedValue"], str, int, float, bool, None
]
NormalizedDocument = Dict[str, NormalizedValue]

SCALAR_TYPES = (str, int, float, bool, type(None))
SEQUENCE_TYPES = (list, tuple)
BYTES_TYPES = (bytes, bytearray)

BYTES_ENCODING = "utf-8"

# Mappings and sequences nested deeper than this are rejected
MAX_NESTING_DEPTH = 100


def normalize(value: Any) -> NormalizedValue:
    """
    Recursively convert ``value`` into its canonical, JSON‑safe form.

    Parameters
    ----------
    value : Any
        A decoded record or any value nested inside one.

    Returns
    -------
    NormalizedValue
        The canonical value.  Values already in canonical shape compare
        equal to the input.

    Raises
    ------
    NonStringKeyError
        If any mapping at any depth has a key that is not a ``str``.
    NestingTooDeepError
        If mappings and sequences are nested deeper than ``MAX_NESTING_DEPTH``.
    UnsupportedValueError
        If a value is not a mapping, sequence, byte buffer or scalar.
    """
    return _normalize(value, 0)


def _normalize(value: Any, depth: int) -> NormalizedValue:
    if isinstance(value, SCALAR_TYPES):
        return value
    if isinstance(value, BYTES_TYPES):
        return bytes(value).decode(BYTES_ENCODING, errors="replace")
    if depth >= MAX_NESTING_DEPTH:
        raise NestingTooDeepError(MAX_NESTING_DEPTH)
    if isinstance(value, Mapping):
        return _normalize_mapping(value, depth + 1)
    if isinstance(value, SEQUENCE_TYPES):
        return [_normalize(item, depth + 1) for item in value]
    raise UnsupportedValueError(value)


def _normalize_mapping(value: Mapping, depth: int) -> NormalizedDocument:
    output = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise NonStringKeyError(key)
        output[key] = _normalize(item, depth)
    return output
