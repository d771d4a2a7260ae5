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

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .authorization import (
    AuthorizationList,
    _as_bytes,
    _as_int,
    _check_range,
    _parse_authorization_list,
    encode_authorization_list,
)
from .base import (
    MalformedEncoding,
    UnknownSecurityLevel,
    ValueOutOfRange,
    catch_builtins,
)
from .config import DecodeOptions, resolve_options
from .der import (
    Buffer,
    encode_enumerated,
    encode_integer,
    encode_octet_string,
    encode_sequence,
    iter_elements,
    read_enumerated,
    read_integer,
    read_octet_string,
    read_sequence,
)
from .enums import UINT32_MAX, SecurityLevel, coerce_enum

logger = logging.getLogger(__name__)

_KEY_DESCRIPTION_FIELDS = 8


def _as_security_level(value, name: str) -> Union[SecurityLevel, int]:
    value = _as_int(value, name)
    try:
        return SecurityLevel(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class AttestationRecord:
    """The decoded KeyDescription carried by the attestation extension.

    ``unique_id`` is mandatory on the wire, so it has no absent state: an
    empty value means device-unique attestation was not requested.
    A security level that is a plain ``int`` was not recognized and only
    comes out of a lenient decode.
    """

    attestation_version: int
    attestation_security_level: Union[SecurityLevel, int]
    keymaster_version: int
    keymaster_security_level: Union[SecurityLevel, int]
    attestation_challenge: bytes
    unique_id: bytes
    software_enforced: AuthorizationList
    tee_enforced: AuthorizationList

    def __post_init__(self):
        _as_int(self.attestation_version, "attestation_version")
        _as_int(self.keymaster_version, "keymaster_version")
        for name in ("attestation_security_level", "keymaster_security_level"):
            level = _as_security_level(getattr(self, name), name)
            object.__setattr__(self, name, level)
        for name in ("attestation_challenge", "unique_id"):
            object.__setattr__(self, name, _as_bytes(getattr(self, name), name))
        for name in ("software_enforced", "tee_enforced"):
            if not isinstance(getattr(self, name), AuthorizationList):
                raise TypeError(f"{name} must be an AuthorizationList")

    @classmethod
    def create(
        cls,
        attestation_version: int,
        attestation_security_level: Union[SecurityLevel, int],
        keymaster_version: int,
        keymaster_security_level: Union[SecurityLevel, int],
        attestation_challenge: bytes = b"",
        unique_id: bytes = b"",
        software_enforced: Optional[AuthorizationList] = None,
        tee_enforced: Optional[AuthorizationList] = None,
    ) -> AttestationRecord:
        """Build a record, defaulting both authorization lists to empty."""

        return cls(
            attestation_version=attestation_version,
            attestation_security_level=attestation_security_level,
            keymaster_version=keymaster_version,
            keymaster_security_level=keymaster_security_level,
            attestation_challenge=attestation_challenge,
            unique_id=unique_id,
            software_enforced=software_enforced or AuthorizationList(),
            tee_enforced=tee_enforced or AuthorizationList(),
        )

    @classmethod
    def from_der(
        cls,
        data: Buffer,
        options: Optional[DecodeOptions] = None,
        *,
        strict: Optional[bool] = None,
    ) -> AttestationRecord:
        return decode_attestation_record(data, options, strict=strict)

    def to_der(self) -> bytes:
        return encode_attestation_record(self)


def _read_version(data, idx, end, name):
    value, next_idx = read_integer(data, idx, end)
    if value < 0:
        raise MalformedEncoding(f"{name} {value} is negative", idx, name)
    return value, next_idx


def _read_security_level(data, idx, end, name, options):
    value, next_idx = read_enumerated(data, idx, end)
    if value < 0:
        raise MalformedEncoding(f"{name} {value} is negative", idx, name)
    level = coerce_enum(
        SecurityLevel, value, options, name, offset=idx, error=UnknownSecurityLevel
    )
    return level, next_idx


@catch_builtins
def decode_attestation_record(
    data: Buffer,
    options: Optional[DecodeOptions] = None,
    *,
    strict: Optional[bool] = None,
) -> AttestationRecord:
    """Decode the DER KeyDescription SEQUENCE into an AttestationRecord.

    The top-level fields are positional, not tagged, so the SEQUENCE must
    hold exactly eight elements in their fixed order.
    """

    options = resolve_options(options, strict)
    view = memoryview(data)
    sequence, idx = read_sequence(view, 0)
    if idx != len(view):
        raise MalformedEncoding("Trailing data after KeyDescription", idx)

    count = sum(1 for _ in iter_elements(view, sequence.start, sequence.end))
    if count != _KEY_DESCRIPTION_FIELDS:
        raise MalformedEncoding(
            f"KeyDescription must have {_KEY_DESCRIPTION_FIELDS} elements, "
            f"found {count}",
            sequence.offset,
            "KeyDescription",
        )

    end = sequence.end
    pos = sequence.start
    attestation_version, pos = _read_version(view, pos, end, "attestation_version")
    attestation_security_level, pos = _read_security_level(
        view, pos, end, "attestation_security_level", options
    )
    keymaster_version, pos = _read_version(view, pos, end, "keymaster_version")
    keymaster_security_level, pos = _read_security_level(
        view, pos, end, "keymaster_security_level", options
    )
    attestation_challenge, pos = read_octet_string(view, pos, end)
    unique_id, pos = read_octet_string(view, pos, end)
    software_sequence, pos = read_sequence(view, pos, end)
    tee_sequence, pos = read_sequence(view, pos, end)

    record = AttestationRecord(
        attestation_version=attestation_version,
        attestation_security_level=attestation_security_level,
        keymaster_version=keymaster_version,
        keymaster_security_level=keymaster_security_level,
        attestation_challenge=attestation_challenge,
        unique_id=unique_id,
        software_enforced=_parse_authorization_list(view, software_sequence, options),
        tee_enforced=_parse_authorization_list(view, tee_sequence, options),
    )
    logger.debug(
        "Decoded attestation record version %d, keymaster version %d",
        attestation_version,
        keymaster_version,
    )
    return record


def encode_attestation_record(record: AttestationRecord) -> bytes:
    """Encode an AttestationRecord as a canonical DER KeyDescription."""

    for name in ("attestation_version", "keymaster_version"):
        if getattr(record, name) < 0:
            raise ValueOutOfRange(name, getattr(record, name), "is negative")
    return encode_sequence(
        encode_integer(record.attestation_version),
        encode_enumerated(
            _check_range(
                int(record.attestation_security_level),
                UINT32_MAX,
                "attestation_security_level",
            )
        ),
        encode_integer(record.keymaster_version),
        encode_enumerated(
            _check_range(
                int(record.keymaster_security_level),
                UINT32_MAX,
                "keymaster_security_level",
            )
        ),
        encode_octet_string(record.attestation_challenge),
        encode_octet_string(record.unique_id),
        encode_authorization_list(record.software_enforced),
        encode_authorization_list(record.tee_enforced),
    )
