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

from __future__ import annotations

from functools import wraps
from typing import Any, Optional


class AttestationError(Exception):
    """Base exception for key attestation decoding and encoding errors."""


class MalformedEncoding(AttestationError):
    """The input is not valid DER for the expected structure."""

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        expected: Optional[str] = None,
    ):
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset
        self.expected = expected


class UnknownField(AttestationError):
    """A tag number or enumerated value is not part of the known schema."""

    def __init__(
        self,
        message: str,
        tag: Optional[int] = None,
        field: Optional[str] = None,
        value: Any = None,
        offset: Optional[int] = None,
    ):
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.tag = tag
        self.field = field
        self.value = value
        self.offset = offset


class UnknownSecurityLevel(UnknownField):
    """A security level ENUMERATED value is outside the closed set."""


class ExtensionNotFound(AttestationError):
    """No certificate carries the key attestation extension."""


class MultipleExtensionsFound(AttestationError):
    """A certificate carries the key attestation extension more than once."""


class ValueOutOfRange(AttestationError, ValueError):
    """A field value cannot be represented in its ASN.1 type."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(f"{field}: {value!r} {reason}")
        self.field = field
        self.value = value


def catch_builtins(f):
    """Utility decorator to wrap stray decoding errors as MalformedEncoding."""

    @wraps(f)
    def inner(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (IndexError, UnicodeDecodeError) as e:
            raise MalformedEncoding(str(e)) from e

    return inner
