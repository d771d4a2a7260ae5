# Copyright (c) 2018 Yubico AB
# All rights reserved.
#
#   Redistribution and use in source and binary forms, with or
#   without modification, are permitted provided that the following
#   conditions are met:
#
#    1. Redistributions of source code must retain the above copyright
#       notice, this list of conditions and the following disclaimer.
#    2. Redistributions in binary form must reproduce the above
#       copyright notice, this list of conditions and the following
#       disclaimer in the documentation and/or other materials provided
#       with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
# "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS
# FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE
# COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING,
# BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES;
# LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT
# LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN
# ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

"""Minimal DER reader and writer for the primitives used by key attestation.

Readers take a buffer, a start index and an optional end bound, and return
``(value, next_index)``. All offsets are absolute within the buffer passed in,
so error messages point at the failing byte of the original input.

Writers always produce definite, minimal-length DER.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from .base import MalformedEncoding, ValueOutOfRange

Buffer = Union[bytes, bytearray, memoryview]

UNIVERSAL = 0
APPLICATION = 1
CONTEXT = 2
PRIVATE = 3

TAG_BOOLEAN = 0x01
TAG_INTEGER = 0x02
TAG_OCTET_STRING = 0x04
TAG_NULL = 0x05
TAG_ENUMERATED = 0x0A
TAG_SEQUENCE = 0x10
TAG_SET = 0x11

_CLASS_NAMES = ("universal", "application", "context", "private")

_UNIVERSAL_NAMES = {
    TAG_BOOLEAN: "BOOLEAN",
    TAG_INTEGER: "INTEGER",
    TAG_OCTET_STRING: "OCTET STRING",
    TAG_NULL: "NULL",
    TAG_ENUMERATED: "ENUMERATED",
    TAG_SEQUENCE: "SEQUENCE",
    TAG_SET: "SET",
}

# Tag numbers and lengths wider than this are never produced by Keymaster.
_MAX_TAG_NUMBER_BYTES = 4
_MAX_LENGTH_BYTES = 4


@dataclass(frozen=True)
class Tag:
    tag_class: int
    constructed: bool
    number: int

    def __str__(self) -> str:
        if self.tag_class == UNIVERSAL and self.number in _UNIVERSAL_NAMES:
            return _UNIVERSAL_NAMES[self.number]
        if self.tag_class == CONTEXT:
            return f"[{self.number}]"
        return f"{_CLASS_NAMES[self.tag_class]} [{self.number}]"


@dataclass(frozen=True)
class Element:
    """A decoded TLV header: the tag and the bounds of its content."""

    tag: Tag
    offset: int
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


def _bound(data: Buffer, end: Optional[int]) -> int:
    return len(data) if end is None else end


def read_tag(data: Buffer, idx: int, end: Optional[int] = None) -> tuple[Tag, int]:
    """Parse an identifier octet sequence and return (tag, new_index)."""

    end = _bound(data, end)
    if idx >= end:
        raise MalformedEncoding("Truncated DER element: missing tag", idx, "tag")
    first = data[idx]
    idx += 1
    number = first & 0x1F
    if number == 0x1F:
        start = idx
        number = 0
        while True:
            if idx >= end:
                raise MalformedEncoding("Truncated high tag number", start, "tag")
            byte = data[idx]
            if idx == start and byte == 0x80:
                raise MalformedEncoding("Non-minimal high tag number", start, "tag")
            idx += 1
            number = (number << 7) | (byte & 0x7F)
            if not byte & 0x80:
                break
            if idx - start >= _MAX_TAG_NUMBER_BYTES:
                raise MalformedEncoding("Tag number too large", start, "tag")
        if number < 0x1F:
            raise MalformedEncoding(
                "High tag number form used for a low tag number", start, "tag"
            )
    return Tag(first >> 6, bool(first & 0x20), number), idx


def read_length(data: Buffer, idx: int, end: Optional[int] = None) -> tuple[int, int]:
    """Parse a DER length field and return (length, new_index)."""

    end = _bound(data, end)
    if idx >= end:
        raise MalformedEncoding("Invalid DER length: truncated data", idx, "length")
    first = data[idx]
    idx += 1
    if first & 0x80 == 0:
        return first, idx
    num_bytes = first & 0x7F
    if num_bytes == 0:
        raise MalformedEncoding(
            "Indefinite length DER encodings are not supported", idx - 1, "length"
        )
    if num_bytes > _MAX_LENGTH_BYTES:
        raise MalformedEncoding("DER length too large", idx - 1, "length")
    if idx + num_bytes > end:
        raise MalformedEncoding("Invalid DER length: truncated data", idx, "length")
    if data[idx] == 0:
        raise MalformedEncoding("Non-minimal DER length", idx - 1, "length")
    length = int.from_bytes(data[idx : idx + num_bytes], "big")
    if length < 0x80:
        raise MalformedEncoding(
            "Long form DER length used for a short length", idx - 1, "length"
        )
    return length, idx + num_bytes


def read_element(
    data: Buffer, idx: int, end: Optional[int] = None
) -> tuple[Element, int]:
    """Parse a tag and length, returning the element and the index past it."""

    end = _bound(data, end)
    offset = idx
    tag, idx = read_tag(data, idx, end)
    length, idx = read_length(data, idx, end)
    if idx + length > end:
        raise MalformedEncoding(
            f"{tag} of length {length} overruns its container", offset, str(tag)
        )
    return Element(tag, offset, idx, idx + length), idx + length


def iter_elements(data: Buffer, start: int, end: int) -> Iterator[Element]:
    """Yield each element found in data[start:end]."""

    idx = start
    while idx < end:
        element, idx = read_element(data, idx, end)
        yield element


def content(data: Buffer, element: Element) -> bytes:
    return bytes(data[element.start : element.end])


def _expect(
    data: Buffer,
    idx: int,
    end: Optional[int],
    number: int,
    constructed: bool = False,
) -> tuple[Element, int]:
    name = _UNIVERSAL_NAMES[number]
    element, next_idx = read_element(data, idx, end)
    tag = element.tag
    if (
        tag.tag_class != UNIVERSAL
        or tag.number != number
        or tag.constructed != constructed
    ):
        raise MalformedEncoding(f"Expected {name}, found {tag}", idx, name)
    return element, next_idx


def _integer_value(data: Buffer, element: Element, name: str) -> int:
    body = content(data, element)
    if not body:
        raise MalformedEncoding(f"{name} has no content", element.offset, name)
    if len(body) > 1 and (
        (body[0] == 0x00 and not body[1] & 0x80)
        or (body[0] == 0xFF and body[1] & 0x80)
    ):
        raise MalformedEncoding(
            f"{name} has redundant leading bytes", element.offset, name
        )
    return int.from_bytes(body, "big", signed=True)


def read_integer(data: Buffer, idx: int, end: Optional[int] = None) -> tuple[int, int]:
    element, idx = _expect(data, idx, end, TAG_INTEGER)
    return _integer_value(data, element, "INTEGER"), idx


def read_enumerated(
    data: Buffer, idx: int, end: Optional[int] = None
) -> tuple[int, int]:
    element, idx = _expect(data, idx, end, TAG_ENUMERATED)
    return _integer_value(data, element, "ENUMERATED"), idx


def read_octet_string(
    data: Buffer, idx: int, end: Optional[int] = None
) -> tuple[bytes, int]:
    element, idx = _expect(data, idx, end, TAG_OCTET_STRING)
    return content(data, element), idx


def read_octet_string_bounds(
    data: Buffer, idx: int, end: Optional[int] = None
) -> tuple[Element, int]:
    """Parse an OCTET STRING whose content is itself DER, without copying it."""

    return _expect(data, idx, end, TAG_OCTET_STRING)


def read_boolean(data: Buffer, idx: int, end: Optional[int] = None) -> tuple[bool, int]:
    """Parse a BOOLEAN. Any non-zero content byte reads as true."""

    element, idx = _expect(data, idx, end, TAG_BOOLEAN)
    if element.length != 1:
        raise MalformedEncoding(
            "BOOLEAN must have exactly one content byte", element.offset, "BOOLEAN"
        )
    return data[element.start] != 0, idx


def read_null(data: Buffer, idx: int, end: Optional[int] = None) -> tuple[None, int]:
    element, idx = _expect(data, idx, end, TAG_NULL)
    if element.length != 0:
        raise MalformedEncoding("NULL must be empty", element.offset, "NULL")
    return None, idx


def read_sequence(
    data: Buffer, idx: int, end: Optional[int] = None
) -> tuple[Element, int]:
    return _expect(data, idx, end, TAG_SEQUENCE, constructed=True)


def read_set(data: Buffer, idx: int, end: Optional[int] = None) -> tuple[Element, int]:
    return _expect(data, idx, end, TAG_SET, constructed=True)


def read_explicit_tag(
    data: Buffer,
    idx: int,
    number: Optional[int] = None,
    end: Optional[int] = None,
) -> tuple[Element, int]:
    """Parse an explicit context-specific tag, optionally checking its number."""

    element, next_idx = read_element(data, idx, end)
    tag = element.tag
    if tag.tag_class != CONTEXT or not tag.constructed:
        raise MalformedEncoding(
            f"Expected explicit context tag, found {tag}", idx, "explicit tag"
        )
    if number is not None and tag.number != number:
        raise MalformedEncoding(
            f"Expected explicit tag [{number}], found {tag}", idx, f"[{number}]"
        )
    return element, next_idx


def encode_tag(tag_class: int, constructed: bool, number: int) -> bytes:
    if number < 0:
        raise ValueOutOfRange("tag number", number, "is negative")
    first = (tag_class << 6) | (0x20 if constructed else 0)
    if number < 0x1F:
        return bytes([first | number])
    digits = [number & 0x7F]
    number >>= 7
    while number:
        digits.append(0x80 | (number & 0x7F))
        number >>= 7
    return bytes([first | 0x1F] + digits[::-1])


def encode_length(length: int) -> bytes:
    if length < 0:
        raise ValueOutOfRange("length", length, "is negative")
    if length < 0x80:
        return bytes([length])
    body = length.to_bytes((length.bit_length() + 7) // 8, "big")
    return bytes([0x80 | len(body)]) + body


def _tlv(identifier: bytes, body: bytes) -> bytes:
    return identifier + encode_length(len(body)) + body


def _integer_body(value: int) -> bytes:
    magnitude = value if value >= 0 else ~value
    return value.to_bytes(magnitude.bit_length() // 8 + 1, "big", signed=True)


def encode_integer(value: int) -> bytes:
    return _tlv(b"\x02", _integer_body(int(value)))


def encode_enumerated(value: int) -> bytes:
    return _tlv(b"\x0a", _integer_body(int(value)))


def encode_octet_string(value: Buffer) -> bytes:
    return _tlv(b"\x04", bytes(value))


def encode_boolean(value: bool) -> bytes:
    return b"\x01\x01\xff" if value else b"\x01\x01\x00"


def encode_null() -> bytes:
    return b"\x05\x00"


def encode_sequence(*parts: bytes) -> bytes:
    return _tlv(b"\x30", b"".join(parts))


def encode_set(parts: Iterable[bytes]) -> bytes:
    """Encode a SET OF from already-encoded elements, sorted as DER requires."""

    return _tlv(b"\x31", b"".join(sorted(parts)))


def encode_explicit_tag(number: int, inner: bytes) -> bytes:
    return _tlv(encode_tag(CONTEXT, True, number), inner)
