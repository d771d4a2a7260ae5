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

"""AuthorizationList model and codec.

An ``AuthorizationList`` is a SEQUENCE of explicitly tagged, individually
optional fields. Each tag number maps to one entry of ``_FIELDS``; adding a
newly observed tag is a one-line change to that table plus the matching
attribute on :class:`AuthorizationList`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import (
    Any,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Tuple,
    Type,
    Union,
)

from .base import MalformedEncoding, UnknownField, ValueOutOfRange, catch_builtins
from .config import LENIENT, DecodeOptions, resolve_options
from .der import (
    CONTEXT,
    TAG_SET,
    UNIVERSAL,
    Buffer,
    Element,
    content,
    encode_boolean,
    encode_enumerated,
    encode_explicit_tag,
    encode_integer,
    encode_null,
    encode_octet_string,
    encode_sequence,
    encode_set,
    iter_elements,
    read_boolean,
    read_element,
    read_enumerated,
    read_integer,
    read_null,
    read_octet_string,
    read_octet_string_bounds,
    read_sequence,
    read_set,
    read_tag,
)
from .enums import (
    UINT32_MAX,
    Algorithm,
    BlockMode,
    Digest,
    EcCurve,
    KeyOrigin,
    KeyPurpose,
    Padding,
    UserAuthType,
    VerifiedBootState,
    coerce_enum,
    user_auth_type_mask,
    user_auth_types,
)

logger = logging.getLogger(__name__)

UINT64_MAX = 0xFFFFFFFFFFFFFFFF

# Largest tag number the reader accepts (four base-128 digits).
_MAX_TAG = 0x0FFFFFFF


def _as_bytes(value: Any, name: str) -> bytes:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{name} must be bytes, not {type(value).__name__}")


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, not {type(value).__name__}")
    return value


def _as_enum(enum_type: Type[Any], value: Any, name: str) -> Any:
    value = _as_int(value, name)
    try:
        return enum_type(value)
    except ValueError:
        return value


def _check_range(value: int, maximum: int, name: str) -> int:
    if value < 0:
        raise ValueOutOfRange(name, value, "is negative")
    if value > maximum:
        raise ValueOutOfRange(name, value, f"exceeds {maximum:#x}")
    return value


def _read_unsigned(
    data: Buffer, idx: int, end: int, maximum: int, name: str
) -> Tuple[int, int]:
    value, next_idx = read_integer(data, idx, end)
    if value < 0 or value > maximum:
        raise MalformedEncoding(
            f"{name} value {value} is outside 0..{maximum:#x}", idx, name
        )
    return value, next_idx


@dataclass(frozen=True)
class RootOfTrust:
    """Verified-boot state reported by the secure environment."""

    verified_boot_key: bytes
    device_locked: bool
    verified_boot_state: Union[VerifiedBootState, int]
    # Absent for attestation versions 1 and 2.
    verified_boot_hash: Optional[bytes] = None

    def __post_init__(self):
        object.__setattr__(
            self,
            "verified_boot_key",
            _as_bytes(self.verified_boot_key, "verified_boot_key"),
        )
        if not isinstance(self.device_locked, bool):
            raise TypeError("device_locked must be a bool")
        object.__setattr__(
            self,
            "verified_boot_state",
            _as_enum(
                VerifiedBootState, self.verified_boot_state, "verified_boot_state"
            ),
        )
        if self.verified_boot_hash is not None:
            object.__setattr__(
                self,
                "verified_boot_hash",
                _as_bytes(self.verified_boot_hash, "verified_boot_hash"),
            )

    @classmethod
    def _parse(
        cls, data: Buffer, idx: int, end: int, options: DecodeOptions
    ) -> Tuple[RootOfTrust, int]:
        sequence, next_idx = read_sequence(data, idx, end)
        pos = sequence.start
        boot_key, pos = read_octet_string(data, pos, sequence.end)
        locked, pos = read_boolean(data, pos, sequence.end)
        state_offset = pos
        state, pos = read_enumerated(data, pos, sequence.end)
        if state < 0:
            raise MalformedEncoding(
                f"verified_boot_state value {state} is negative",
                state_offset,
                "verified_boot_state",
            )
        boot_hash = None
        if pos < sequence.end:
            boot_hash, pos = read_octet_string(data, pos, sequence.end)
        if pos != sequence.end:
            raise MalformedEncoding(
                "Unexpected trailing element in RootOfTrust", pos, "end of RootOfTrust"
            )
        return (
            cls(
                verified_boot_key=boot_key,
                device_locked=locked,
                verified_boot_state=coerce_enum(
                    VerifiedBootState,
                    state,
                    options,
                    "verified_boot_state",
                    offset=state_offset,
                ),
                verified_boot_hash=boot_hash,
            ),
            next_idx,
        )

    @classmethod
    @catch_builtins
    def from_der(
        cls,
        data: Buffer,
        options: Optional[DecodeOptions] = None,
        *,
        strict: Optional[bool] = None,
    ) -> RootOfTrust:
        view = memoryview(data)
        value, idx = cls._parse(view, 0, len(view), resolve_options(options, strict))
        if idx != len(view):
            raise MalformedEncoding("Trailing data after RootOfTrust", idx)
        return value

    def to_der(self) -> bytes:
        parts = [
            encode_octet_string(self.verified_boot_key),
            encode_boolean(self.device_locked),
            encode_enumerated(
                _check_range(
                    int(self.verified_boot_state), UINT32_MAX, "verified_boot_state"
                )
            ),
        ]
        if self.verified_boot_hash is not None:
            parts.append(encode_octet_string(self.verified_boot_hash))
        return encode_sequence(*parts)


@dataclass(frozen=True)
class AttestationPackageInfo:
    package_name: str
    version: int

    def __post_init__(self):
        if not isinstance(self.package_name, str):
            raise TypeError("package_name must be a str")
        _as_int(self.version, "version")

    def to_der(self) -> bytes:
        return encode_sequence(
            encode_octet_string(self.package_name.encode("utf-8")),
            encode_integer(_check_range(self.version, UINT64_MAX, "version")),
        )


@dataclass(frozen=True)
class AttestationApplicationId:
    """The packages and signing certificates of the app that owns the key."""

    package_infos: FrozenSet[AttestationPackageInfo] = frozenset()
    signature_digests: FrozenSet[bytes] = frozenset()

    def __post_init__(self):
        infos = frozenset(self.package_infos)
        for info in infos:
            if not isinstance(info, AttestationPackageInfo):
                raise TypeError("package_infos must contain AttestationPackageInfo")
        object.__setattr__(self, "package_infos", infos)
        object.__setattr__(
            self,
            "signature_digests",
            frozenset(
                _as_bytes(digest, "signature_digests")
                for digest in self.signature_digests
            ),
        )

    @classmethod
    def _parse(cls, data: Buffer, start: int, end: int) -> AttestationApplicationId:
        sequence, idx = read_sequence(data, start, end)
        if idx != end:
            raise MalformedEncoding(
                "Trailing data after AttestationApplicationId", idx
            )
        packages, pos = read_set(data, sequence.start, sequence.end)
        digests, pos = read_set(data, pos, sequence.end)
        if pos != sequence.end:
            raise MalformedEncoding(
                "Unexpected trailing element in AttestationApplicationId",
                pos,
                "end of AttestationApplicationId",
            )

        infos = set()
        pos = packages.start
        while pos < packages.end:
            package, pos = read_sequence(data, pos, packages.end)
            name, inner = read_octet_string(data, package.start, package.end)
            version, inner = _read_unsigned(
                data, inner, package.end, UINT64_MAX, "version"
            )
            if inner != package.end:
                raise MalformedEncoding(
                    "Unexpected trailing element in AttestationPackageInfo",
                    inner,
                    "end of AttestationPackageInfo",
                )
            try:
                package_name = name.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedEncoding(
                    "Package name is not valid UTF-8", package.offset, "package_name"
                ) from e
            info = AttestationPackageInfo(package_name, version)
            if info in infos:
                raise MalformedEncoding(
                    "Duplicate AttestationPackageInfo in SET OF",
                    package.offset,
                    "package_infos",
                )
            infos.add(info)

        signature_digests = set()
        pos = digests.start
        while pos < digests.end:
            digest_offset = pos
            digest, pos = read_octet_string(data, pos, digests.end)
            if digest in signature_digests:
                raise MalformedEncoding(
                    "Duplicate signature digest in SET OF",
                    digest_offset,
                    "signature_digests",
                )
            signature_digests.add(digest)

        return cls(frozenset(infos), frozenset(signature_digests))

    @classmethod
    @catch_builtins
    def from_der(cls, data: Buffer) -> AttestationApplicationId:
        """Parse the DER carried inside the attestation application id tag."""

        view = memoryview(data)
        return cls._parse(view, 0, len(view))

    def to_der(self) -> bytes:
        return encode_sequence(
            encode_set(info.to_der() for info in self.package_infos),
            encode_set(encode_octet_string(d) for d in self.signature_digests),
        )


class _Codec:
    """Decodes, encodes and type-checks the value of one tag."""

    default: Any = None

    def validate(self, value: Any, name: str) -> Any:
        raise NotImplementedError()

    def decode(
        self, data: Buffer, idx: int, end: int, options: DecodeOptions, spec: _FieldSpec
    ) -> Tuple[Any, int]:
        raise NotImplementedError()

    def encode(self, value: Any, name: str) -> bytes:
        raise NotImplementedError()


class _IntegerCodec(_Codec):
    def __init__(self, maximum: int = UINT32_MAX):
        self.maximum = maximum

    def validate(self, value, name):
        return _as_int(value, name)

    def decode(self, data, idx, end, options, spec):
        return _read_unsigned(data, idx, end, self.maximum, spec.name)

    def encode(self, value, name):
        return encode_integer(_check_range(value, self.maximum, name))


class _EnumCodec(_IntegerCodec):
    def __init__(self, enum_type: Type[Any]):
        super().__init__(UINT32_MAX)
        self.enum_type = enum_type

    def validate(self, value, name):
        return _as_enum(self.enum_type, value, name)

    def decode(self, data, idx, end, options, spec):
        value, next_idx = super().decode(data, idx, end, options, spec)
        return (
            coerce_enum(self.enum_type, value, options, spec.name, spec.tag, idx),
            next_idx,
        )


class _EnumSetCodec(_Codec):
    def __init__(self, enum_type: Type[Any]):
        self.enum_type = enum_type

    def validate(self, value, name):
        if isinstance(value, (str, bytes, int)):
            raise TypeError(f"{name} must be a collection of {self.enum_type.__name__}")
        return frozenset(_as_enum(self.enum_type, v, name) for v in value)

    def decode(self, data, idx, end, options, spec):
        members, next_idx = read_set(data, idx, end)
        values = set()
        pos = members.start
        while pos < members.end:
            item_offset = pos
            value, pos = _read_unsigned(data, pos, members.end, UINT32_MAX, spec.name)
            if value in values:
                raise MalformedEncoding(
                    f"Duplicate {spec.name} value {value} in SET OF",
                    item_offset,
                    spec.name,
                )
            values.add(
                coerce_enum(
                    self.enum_type, value, options, spec.name, spec.tag, item_offset
                )
            )
        return frozenset(values), next_idx

    def encode(self, value, name):
        return encode_set(
            encode_integer(_check_range(int(v), UINT32_MAX, name)) for v in value
        )


class _UserAuthTypeCodec(_Codec):
    """Keymaster authenticator bitmask, modelled as a set of UserAuthType."""

    def validate(self, value, name):
        if isinstance(value, (str, bytes, int)):
            raise TypeError(f"{name} must be a collection of UserAuthType")
        mask = user_auth_type_mask(_as_int(v, name) for v in value)
        return user_auth_types(mask, LENIENT)

    def decode(self, data, idx, end, options, spec):
        tag, _ = read_tag(data, idx, end)
        if tag.tag_class == UNIVERSAL and tag.number == TAG_SET:
            # Some producers emit the authenticator types as a SET OF INTEGER.
            members, next_idx = read_set(data, idx, end)
            values = []
            pos = members.start
            while pos < members.end:
                value, pos = _read_unsigned(
                    data, pos, members.end, UINT32_MAX, spec.name
                )
                values.append(value)
            mask = user_auth_type_mask(values)
        else:
            mask, next_idx = _read_unsigned(data, idx, end, UINT32_MAX, spec.name)
        return user_auth_types(mask, options, spec.tag, idx), next_idx

    def encode(self, value, name):
        mask = user_auth_type_mask(value)
        return encode_integer(_check_range(mask, UINT32_MAX, name))


class _NullCodec(_Codec):
    """A flag that is true when the tag is present, encoded as NULL."""

    default = False

    def validate(self, value, name):
        if not isinstance(value, bool):
            raise TypeError(f"{name} must be a bool")
        return value

    def decode(self, data, idx, end, options, spec):
        _, next_idx = read_null(data, idx, end)
        return True, next_idx

    def encode(self, value, name):
        return encode_null()


class _OctetStringCodec(_Codec):
    def validate(self, value, name):
        return _as_bytes(value, name)

    def decode(self, data, idx, end, options, spec):
        return read_octet_string(data, idx, end)

    def encode(self, value, name):
        return encode_octet_string(value)


class _RootOfTrustCodec(_Codec):
    def validate(self, value, name):
        if not isinstance(value, RootOfTrust):
            raise TypeError(f"{name} must be a RootOfTrust")
        return value

    def decode(self, data, idx, end, options, spec):
        return RootOfTrust._parse(data, idx, end, options)

    def encode(self, value, name):
        return value.to_der()


class _ApplicationIdCodec(_Codec):
    """An OCTET STRING wrapping a DER AttestationApplicationId."""

    def validate(self, value, name):
        if not isinstance(value, AttestationApplicationId):
            raise TypeError(f"{name} must be an AttestationApplicationId")
        return value

    def decode(self, data, idx, end, options, spec):
        wrapper, next_idx = read_octet_string_bounds(data, idx, end)
        return (
            AttestationApplicationId._parse(data, wrapper.start, wrapper.end),
            next_idx,
        )

    def encode(self, value, name):
        return encode_octet_string(value.to_der())


@dataclass(frozen=True)
class _FieldSpec:
    tag: int
    name: str
    codec: _Codec


_uint32 = _IntegerCodec(UINT32_MAX)
_uint64 = _IntegerCodec(UINT64_MAX)
_null = _NullCodec()
_octets = _OctetStringCodec()

_FIELDS: Tuple[_FieldSpec, ...] = (
    _FieldSpec(1, "purpose", _EnumSetCodec(KeyPurpose)),
    _FieldSpec(2, "algorithm", _EnumCodec(Algorithm)),
    _FieldSpec(3, "key_size", _uint32),
    _FieldSpec(4, "block_mode", _EnumSetCodec(BlockMode)),
    _FieldSpec(5, "digest", _EnumSetCodec(Digest)),
    _FieldSpec(6, "padding", _EnumSetCodec(Padding)),
    _FieldSpec(10, "ec_curve", _EnumCodec(EcCurve)),
    _FieldSpec(200, "rsa_public_exponent", _uint64),
    _FieldSpec(203, "mgf_digest", _EnumSetCodec(Digest)),
    _FieldSpec(303, "rollback_resistance", _null),
    _FieldSpec(305, "early_boot_only", _null),
    _FieldSpec(400, "active_date_time", _uint64),
    _FieldSpec(401, "origination_expire_date_time", _uint64),
    _FieldSpec(402, "usage_expire_date_time", _uint64),
    _FieldSpec(405, "usage_count_limit", _uint32),
    _FieldSpec(503, "no_auth_required", _null),
    _FieldSpec(504, "user_auth_type", _UserAuthTypeCodec()),
    _FieldSpec(505, "auth_timeout", _uint32),
    _FieldSpec(506, "allow_while_on_body", _null),
    _FieldSpec(507, "trusted_user_presence_required", _null),
    _FieldSpec(508, "trusted_confirmation_required", _null),
    _FieldSpec(509, "unlocked_device_required", _null),
    _FieldSpec(600, "all_applications", _null),
    _FieldSpec(601, "application_id", _octets),
    _FieldSpec(701, "creation_date_time", _uint64),
    _FieldSpec(702, "origin", _EnumCodec(KeyOrigin)),
    _FieldSpec(703, "rollback_resistant", _null),
    _FieldSpec(704, "root_of_trust", _RootOfTrustCodec()),
    _FieldSpec(705, "os_version", _uint32),
    _FieldSpec(706, "os_patch_level", _uint32),
    _FieldSpec(709, "attestation_application_id", _ApplicationIdCodec()),
    _FieldSpec(710, "attestation_id_brand", _octets),
    _FieldSpec(711, "attestation_id_device", _octets),
    _FieldSpec(712, "attestation_id_product", _octets),
    _FieldSpec(713, "attestation_id_serial", _octets),
    _FieldSpec(714, "attestation_id_imei", _octets),
    _FieldSpec(715, "attestation_id_meid", _octets),
    _FieldSpec(716, "attestation_id_manufacturer", _octets),
    _FieldSpec(717, "attestation_id_model", _octets),
    _FieldSpec(718, "vendor_patch_level", _uint32),
    _FieldSpec(719, "boot_patch_level", _uint32),
    _FieldSpec(720, "device_unique_attestation", _null),
    _FieldSpec(723, "attestation_id_second_imei", _octets),
    _FieldSpec(724, "module_hash", _octets),
)

_FIELDS_BY_TAG: Dict[int, _FieldSpec] = {spec.tag: spec for spec in _FIELDS}
_FIELDS_BY_NAME: Dict[str, _FieldSpec] = {spec.name: spec for spec in _FIELDS}

KNOWN_TAGS: FrozenSet[int] = frozenset(_FIELDS_BY_TAG)


def _is_present(spec: _FieldSpec, value: Any) -> bool:
    return value is not None and value is not spec.codec.default


def _validate_unknown_tags(
    items: Iterable[Tuple[int, Buffer]]
) -> Tuple[Tuple[int, bytes], ...]:
    result: Dict[int, bytes] = {}
    for tag, raw in items:
        name = "unknown tag number"
        tag = _check_range(_as_int(tag, name), _MAX_TAG, name)
        if tag in _FIELDS_BY_TAG:
            raise ValueError(
                f"Tag [{tag}] is a known field; set {_FIELDS_BY_TAG[tag].name}"
            )
        if tag in result:
            raise ValueError(f"Tag [{tag}] appears more than once")
        raw = _as_bytes(raw, f"content of tag [{tag}]")
        _, end = read_element(raw, 0)
        if end != len(raw):
            raise MalformedEncoding(
                f"Content of tag [{tag}] must be exactly one element", end
            )
        result[tag] = raw
    return tuple(sorted(result.items()))


@dataclass(frozen=True)
class AuthorizationList:
    """Immutable set of key authorizations.

    ``None`` means the tag is absent. NULL-encoded flags are plain bools that
    are ``True`` exactly when the tag is present. Set-valued fields are
    frozensets, where an empty frozenset is a present but empty SET.
    ``unknown_tags`` holds tags outside the known schema that were kept by a
    lenient decode, as ``(tag_number, raw_content)`` pairs.
    """

    purpose: Optional[FrozenSet[Union[KeyPurpose, int]]] = None
    algorithm: Optional[Union[Algorithm, int]] = None
    key_size: Optional[int] = None
    block_mode: Optional[FrozenSet[Union[BlockMode, int]]] = None
    digest: Optional[FrozenSet[Union[Digest, int]]] = None
    padding: Optional[FrozenSet[Union[Padding, int]]] = None
    ec_curve: Optional[Union[EcCurve, int]] = None
    rsa_public_exponent: Optional[int] = None
    mgf_digest: Optional[FrozenSet[Union[Digest, int]]] = None
    rollback_resistance: bool = False
    early_boot_only: bool = False
    active_date_time: Optional[int] = None
    origination_expire_date_time: Optional[int] = None
    usage_expire_date_time: Optional[int] = None
    usage_count_limit: Optional[int] = None
    no_auth_required: bool = False
    user_auth_type: Optional[FrozenSet[Union[UserAuthType, int]]] = None
    auth_timeout: Optional[int] = None
    allow_while_on_body: bool = False
    trusted_user_presence_required: bool = False
    trusted_confirmation_required: bool = False
    unlocked_device_required: bool = False
    all_applications: bool = False
    application_id: Optional[bytes] = None
    creation_date_time: Optional[int] = None
    origin: Optional[Union[KeyOrigin, int]] = None
    rollback_resistant: bool = False
    root_of_trust: Optional[RootOfTrust] = None
    os_version: Optional[int] = None
    os_patch_level: Optional[int] = None
    attestation_application_id: Optional[AttestationApplicationId] = None
    attestation_id_brand: Optional[bytes] = None
    attestation_id_device: Optional[bytes] = None
    attestation_id_product: Optional[bytes] = None
    attestation_id_serial: Optional[bytes] = None
    attestation_id_imei: Optional[bytes] = None
    attestation_id_meid: Optional[bytes] = None
    attestation_id_manufacturer: Optional[bytes] = None
    attestation_id_model: Optional[bytes] = None
    vendor_patch_level: Optional[int] = None
    boot_patch_level: Optional[int] = None
    device_unique_attestation: bool = False
    attestation_id_second_imei: Optional[bytes] = None
    module_hash: Optional[bytes] = None
    unknown_tags: Tuple[Tuple[int, bytes], ...] = ()

    def __post_init__(self):
        for spec in _FIELDS:
            value = getattr(self, spec.name)
            if value is not None:
                value = spec.codec.validate(value, spec.name)
                object.__setattr__(self, spec.name, value)
        unknown = _validate_unknown_tags(self.unknown_tags)
        object.__setattr__(self, "unknown_tags", unknown)

    @staticmethod
    def builder() -> AuthorizationListBuilder:
        return AuthorizationListBuilder()

    def to_builder(self) -> AuthorizationListBuilder:
        builder = AuthorizationListBuilder()
        for spec in _FIELDS:
            value = getattr(self, spec.name)
            if _is_present(spec, value):
                setattr(builder, spec.name, value)
        for tag, raw in self.unknown_tags:
            builder.set_unknown_tag(tag, raw)
        return builder

    def tags(self) -> List[int]:
        """Return the tag numbers this list would encode, in ascending order."""
        present = [
            spec.tag for spec in _FIELDS if _is_present(spec, getattr(self, spec.name))
        ]
        return sorted(present + [tag for tag, _ in self.unknown_tags])

    @classmethod
    def from_der(
        cls,
        data: Buffer,
        options: Optional[DecodeOptions] = None,
        *,
        strict: Optional[bool] = None,
    ) -> AuthorizationList:
        return decode_authorization_list(data, options, strict=strict)

    def to_der(self) -> bytes:
        return encode_authorization_list(self)


class AuthorizationListBuilder:
    """Mutable staging area that is finalized into an AuthorizationList.

    Fields are set by attribute assignment or with chained ``set_<field>``
    calls. Assigned values are type-checked immediately; assigning ``None``
    clears a slot.
    """

    def __init__(self, **values: Any):
        object.__setattr__(self, "_values", {})
        object.__setattr__(self, "_unknown_tags", {})
        for name, value in values.items():
            setattr(self, name, value)

    def __getattr__(self, name: str) -> Any:
        spec = _FIELDS_BY_NAME.get(name)
        if spec is not None:
            return self._values.get(name, spec.codec.default)
        if name.startswith("set_") and name[4:] in _FIELDS_BY_NAME:
            return partial(self.set, name[4:])
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute {name!r}"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        spec = _FIELDS_BY_NAME.get(name)
        if spec is None:
            raise AttributeError(f"AuthorizationList has no field {name!r}")
        if value is None:
            self._values.pop(name, None)
            return
        value = spec.codec.validate(value, name)
        if _is_present(spec, value):
            self._values[name] = value
        else:
            self._values.pop(name, None)

    def set(self, name: str, value: Any) -> AuthorizationListBuilder:
        setattr(self, name, value)
        return self

    def set_unknown_tag(self, tag: int, raw: Buffer) -> AuthorizationListBuilder:
        """Carry a tag outside the known schema, given its raw DER content."""
        ((tag, raw),) = _validate_unknown_tags([(tag, raw)])
        self._unknown_tags[tag] = raw
        return self

    def build(self) -> AuthorizationList:
        return AuthorizationList(
            unknown_tags=tuple(self._unknown_tags.items()), **self._values
        )


def _parse_authorization_list(
    data: Buffer, sequence: Element, options: DecodeOptions
) -> AuthorizationList:
    builder = AuthorizationListBuilder()
    seen = set()
    for element in iter_elements(data, sequence.start, sequence.end):
        tag = element.tag
        if tag.tag_class != CONTEXT or not tag.constructed:
            raise MalformedEncoding(
                f"Expected explicit context tag, found {tag}",
                element.offset,
                "explicit tag",
            )
        if tag.number in seen:
            raise MalformedEncoding(
                f"Duplicate authorization tag [{tag.number}]",
                element.offset,
                f"[{tag.number}]",
            )
        seen.add(tag.number)

        spec = _FIELDS_BY_TAG.get(tag.number)
        if spec is None:
            if options.strict:
                raise UnknownField(
                    f"Unknown authorization tag [{tag.number}]",
                    tag=tag.number,
                    offset=element.offset,
                )
            _, inner_end = read_element(data, element.start, element.end)
            if inner_end != element.end:
                raise MalformedEncoding(
                    f"Explicit tag [{tag.number}] must wrap exactly one element",
                    inner_end,
                    f"[{tag.number}]",
                )
            logger.debug(
                "Retaining unknown authorization tag [%d] at offset %d",
                tag.number,
                element.offset,
            )
            builder.set_unknown_tag(tag.number, content(data, element))
            continue

        value, inner_end = spec.codec.decode(
            data, element.start, element.end, options, spec
        )
        if inner_end != element.end:
            raise MalformedEncoding(
                f"Explicit tag [{tag.number}] must wrap exactly one element",
                inner_end,
                spec.name,
            )
        setattr(builder, spec.name, value)
    return builder.build()


@catch_builtins
def decode_authorization_list(
    data: Buffer,
    options: Optional[DecodeOptions] = None,
    *,
    strict: Optional[bool] = None,
) -> AuthorizationList:
    """Decode a DER AuthorizationList SEQUENCE."""

    view = memoryview(data)
    sequence, idx = read_sequence(view, 0)
    if idx != len(view):
        raise MalformedEncoding("Trailing data after AuthorizationList", idx)
    return _parse_authorization_list(view, sequence, resolve_options(options, strict))


def encode_authorization_list(auth_list: AuthorizationList) -> bytes:
    """Encode populated fields as explicit tags in ascending tag order."""

    items = [
        (spec.tag, spec.codec.encode(getattr(auth_list, spec.name), spec.name))
        for spec in _FIELDS
        if _is_present(spec, getattr(auth_list, spec.name))
    ]
    items.extend(auth_list.unknown_tags)
    items.sort(key=lambda item: item[0])
    return encode_sequence(*(encode_explicit_tag(tag, inner) for tag, inner in items))
