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
from enum import IntEnum, unique
from typing import FrozenSet, Iterable, Optional, Type, TypeVar, Union

from .base import UnknownField
from .config import DecodeOptions

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=IntEnum)

UINT32_MAX = 0xFFFFFFFF


@unique
class SecurityLevel(IntEnum):
    """Where a key or an attestation is enforced."""

    SOFTWARE = 0
    TRUSTED_ENVIRONMENT = 1
    STRONG_BOX = 2


@unique
class VerifiedBootState(IntEnum):
    VERIFIED = 0
    SELF_SIGNED = 1
    UNVERIFIED = 2
    FAILED = 3


@unique
class UserAuthType(IntEnum):
    """Authenticator types, carried on the wire as a bitmask."""

    NONE = 0
    PASSWORD = 1
    FINGERPRINT = 2
    ANY = UINT32_MAX


@unique
class KeyPurpose(IntEnum):
    ENCRYPT = 0
    DECRYPT = 1
    SIGN = 2
    VERIFY = 3
    DERIVE_KEY = 4
    WRAP_KEY = 5
    AGREE_KEY = 6
    ATTEST_KEY = 7


@unique
class Algorithm(IntEnum):
    RSA = 1
    EC = 3
    AES = 32
    TRIPLE_DES = 33
    HMAC = 128


@unique
class BlockMode(IntEnum):
    ECB = 1
    CBC = 2
    CTR = 3
    GCM = 32


@unique
class Digest(IntEnum):
    NONE = 0
    MD5 = 1
    SHA1 = 2
    SHA_2_224 = 3
    SHA_2_256 = 4
    SHA_2_384 = 5
    SHA_2_512 = 6


@unique
class Padding(IntEnum):
    NONE = 1
    RSA_OAEP = 2
    RSA_PSS = 3
    RSA_PKCS1_1_5_ENCRYPT = 4
    RSA_PKCS1_1_5_SIGN = 5
    PKCS7 = 64


@unique
class EcCurve(IntEnum):
    P_224 = 0
    P_256 = 1
    P_384 = 2
    P_521 = 3
    CURVE_25519 = 4


@unique
class KeyOrigin(IntEnum):
    GENERATED = 0
    DERIVED = 1
    IMPORTED = 2
    RESERVED = 3
    SECURELY_IMPORTED = 4


def coerce_enum(
    enum_type: Type[E],
    value: int,
    options: DecodeOptions,
    field: str,
    tag: Optional[int] = None,
    offset: Optional[int] = None,
    error: Type[UnknownField] = UnknownField,
) -> Union[E, int]:
    """Map a decoded integer onto ``enum_type``.

    Unrecognized values raise ``error`` in strict mode and are returned as
    the raw ``int`` in lenient mode.
    """

    try:
        return enum_type(value)
    except ValueError:
        if options.strict:
            raise error(
                f"Unknown {enum_type.__name__} value {value} for {field}",
                tag=tag,
                field=field,
                value=value,
                offset=offset,
            )
    logger.debug(
        "Retaining unknown %s value %d for %s", enum_type.__name__, value, field
    )
    return value


def user_auth_type_mask(values: Iterable[Union[UserAuthType, int]]) -> int:
    """Fold a set of authenticator types into the Keymaster bitmask."""

    mask = 0
    for value in values:
        if value == UserAuthType.ANY:
            return UINT32_MAX
        mask |= int(value)
    return mask


def user_auth_types(
    mask: int,
    options: DecodeOptions,
    tag: Optional[int] = None,
    offset: Optional[int] = None,
) -> FrozenSet[Union[UserAuthType, int]]:
    """Expand a Keymaster authenticator bitmask into a set.

    ``0`` maps to ``{NONE}`` and the all-ones mask to ``{ANY}``. Bits outside
    ``PASSWORD | FINGERPRINT`` are unknown values.
    """

    if mask == 0:
        return frozenset({UserAuthType.NONE})
    if mask == UINT32_MAX:
        return frozenset({UserAuthType.ANY})
    values: set = set()
    for member in (UserAuthType.PASSWORD, UserAuthType.FINGERPRINT):
        if mask & member:
            values.add(member)
    leftover = mask & ~(UserAuthType.PASSWORD | UserAuthType.FINGERPRINT)
    if leftover:
        if options.strict:
            raise UnknownField(
                f"Unknown user_auth_type bits {leftover:#x}",
                tag=tag,
                field="user_auth_type",
                value=mask,
                offset=offset,
            )
        logger.debug("Retaining unknown user_auth_type bits %#x", leftover)
        values.add(leftover)
    return frozenset(values)
