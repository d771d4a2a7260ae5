"""Tests for decoding and encoding the KeyDescription record."""

import pytest

from keyattestation import (
    Algorithm,
    AttestationPackageInfo,
    AttestationRecord,
    AuthorizationList,
    Digest,
    KeyOrigin,
    KeyPurpose,
    MalformedEncoding,
    Padding,
    SecurityLevel,
    UnknownSecurityLevel,
    UserAuthType,
    ValueOutOfRange,
    VerifiedBootState,
    decode_attestation_record,
    parse_attestation_record,
)
from keyattestation.der import (
    encode_enumerated,
    encode_integer,
    encode_octet_string,
    encode_sequence,
)

BOOT_HASH = bytes.fromhex(
    "728db1274f1f1cf1571de4380b048a554ac4a380e76f5355083529084a937801"
)
SIGNATURE_DIGEST = bytes.fromhex(
    "301aa3cb081134501c45f1422abc66c24224fd5ded5fdc8f17e697176fd866aa"
)


def _key_description(*fields):
    return encode_sequence(*fields)


def _header(version=3, level=1, keymaster_version=4, keymaster_level=1):
    return [
        encode_integer(version),
        encode_enumerated(level),
        encode_integer(keymaster_version),
        encode_enumerated(keymaster_level),
        encode_octet_string(b"abc"),
        encode_octet_string(b""),
    ]


EMPTY_LIST = encode_sequence()


def test_parse_sample_chain(sample_chain):
    record = parse_attestation_record(sample_chain)

    assert record.attestation_version == 3
    assert record.attestation_security_level == SecurityLevel.TRUSTED_ENVIRONMENT
    assert record.keymaster_version == 4
    assert record.keymaster_security_level == SecurityLevel.TRUSTED_ENVIRONMENT
    assert record.attestation_challenge == b"abc"
    assert record.unique_id == b""


def test_sample_tee_enforced_list(attestation_extension):
    tee = decode_attestation_record(attestation_extension).tee_enforced

    assert tee.purpose == frozenset({KeyPurpose.SIGN, KeyPurpose.VERIFY})
    assert tee.algorithm is Algorithm.RSA
    assert tee.key_size == 2048
    assert tee.digest == frozenset({Digest.SHA_2_256})
    assert tee.padding == frozenset({Padding.RSA_PSS, Padding.RSA_PKCS1_1_5_SIGN})
    assert tee.rsa_public_exponent == 65537
    assert tee.no_auth_required is True
    assert tee.origin is KeyOrigin.GENERATED
    assert tee.os_version == 0
    assert tee.os_patch_level == 201907
    assert tee.vendor_patch_level == 201907
    assert tee.boot_patch_level == 201907
    assert tee.user_auth_type is None
    assert tee.tags() == [1, 2, 3, 5, 6, 200, 503, 702, 704, 705, 706, 718, 719]

    root = tee.root_of_trust
    assert root.verified_boot_key == bytes(32)
    assert root.device_locked is False
    assert root.verified_boot_state is VerifiedBootState.UNVERIFIED
    assert root.verified_boot_hash == BOOT_HASH


def test_sample_software_enforced_list(attestation_extension):
    software = decode_attestation_record(attestation_extension).software_enforced

    assert software.tags() == [701, 709]
    assert software.creation_date_time == 0x0164E6061187

    app_id = software.attestation_application_id
    assert len(app_id.package_infos) == 13
    assert AttestationPackageInfo("android", 29) in app_id.package_infos
    assert (
        AttestationPackageInfo("com.google.android.hiddenmenu", 1)
        in app_id.package_infos
    )
    assert app_id.signature_digests == frozenset({SIGNATURE_DIGEST})


def test_sample_decodes_in_strict_mode(attestation_extension):
    record = decode_attestation_record(attestation_extension, strict=True)

    assert record.software_enforced.unknown_tags == ()
    assert record.tee_enforced.unknown_tags == ()


def test_sample_reencodes_byte_for_byte(attestation_extension, leaf_extension):
    for data in (attestation_extension, leaf_extension):
        assert decode_attestation_record(data).to_der() == data


def test_leaf_record(leaf_extension):
    record = AttestationRecord.from_der(leaf_extension)

    assert record.attestation_version == 1
    assert record.keymaster_version == 2
    assert record.attestation_challenge == b"A random challenge"
    assert record.software_enforced == AuthorizationList()
    assert record.tee_enforced.attestation_id_serial == b"SERIAL"
    assert record.tee_enforced.attestation_id_imei == b"IMEI"


def test_create_and_round_trip():
    tee = (
        AuthorizationList.builder()
        .set_user_auth_type({UserAuthType.FINGERPRINT})
        .set_attestation_id_brand(b"free food")
        .build()
    )
    record = AttestationRecord.create(
        2,
        SecurityLevel.TRUSTED_ENVIRONMENT,
        4,
        SecurityLevel.SOFTWARE,
        attestation_challenge=b"abc",
        unique_id=b"foodplease",
        tee_enforced=tee,
    )

    decoded = AttestationRecord.from_der(record.to_der())

    assert decoded == record
    assert decoded.software_enforced == AuthorizationList()
    assert decoded.tee_enforced.user_auth_type == frozenset({UserAuthType.FINGERPRINT})
    assert decoded.tee_enforced.attestation_id_brand == b"free food"


def test_create_defaults_to_empty_lists():
    record = AttestationRecord.create(4, 1, 41, 1)

    assert record.attestation_challenge == b""
    assert record.unique_id == b""
    assert record.software_enforced.tags() == []
    assert record.to_der() == _key_description(
        encode_integer(4),
        encode_enumerated(1),
        encode_integer(41),
        encode_enumerated(1),
        encode_octet_string(b""),
        encode_octet_string(b""),
        EMPTY_LIST,
        EMPTY_LIST,
    )


def test_unique_id_is_kept_verbatim():
    record = AttestationRecord.create(3, 1, 4, 1, unique_id=b"\x00\x01")

    assert AttestationRecord.from_der(record.to_der()).unique_id == b"\x00\x01"


@pytest.mark.parametrize("count", [7, 9])
def test_wrong_element_count_is_malformed(count):
    fields = (_header() + [EMPTY_LIST, EMPTY_LIST, EMPTY_LIST])[:count]

    with pytest.raises(MalformedEncoding) as exc_info:
        decode_attestation_record(_key_description(*fields))

    assert exc_info.value.expected == "KeyDescription"


def test_trailing_data_is_malformed(leaf_extension):
    with pytest.raises(MalformedEncoding):
        decode_attestation_record(leaf_extension + b"\x00")


def test_truncated_input_is_malformed(attestation_extension):
    with pytest.raises(MalformedEncoding):
        decode_attestation_record(attestation_extension[:-1])


def test_fields_out_of_order_are_malformed():
    header = _header()
    header[0], header[1] = header[1], header[0]

    with pytest.raises(MalformedEncoding):
        decode_attestation_record(_key_description(*header, EMPTY_LIST, EMPTY_LIST))


def test_unknown_security_level():
    data = _key_description(*_header(level=5), EMPTY_LIST, EMPTY_LIST)

    with pytest.raises(UnknownSecurityLevel) as exc_info:
        decode_attestation_record(data, strict=True)
    assert exc_info.value.field == "attestation_security_level"
    assert exc_info.value.value == 5

    record = decode_attestation_record(data, strict=False)
    assert record.attestation_security_level == 5
    assert record.to_der() == data


def test_unknown_security_level_strict_from_environment(monkeypatch):
    data = _key_description(*_header(keymaster_level=7), EMPTY_LIST, EMPTY_LIST)
    monkeypatch.setenv("KEYATTESTATION_STRICT", "true")

    with pytest.raises(UnknownSecurityLevel):
        decode_attestation_record(data)


def test_negative_version_is_malformed():
    data = _key_description(*_header(version=-1), EMPTY_LIST, EMPTY_LIST)

    with pytest.raises(MalformedEncoding) as exc_info:
        decode_attestation_record(data)

    assert exc_info.value.expected == "attestation_version"


def test_negative_version_cannot_be_encoded():
    record = AttestationRecord.create(-1, 1, 4, 1)

    with pytest.raises(ValueOutOfRange):
        record.to_der()


def test_record_validates_types():
    with pytest.raises(TypeError):
        AttestationRecord.create(3, 1, 4, 1, attestation_challenge="abc")
    with pytest.raises(TypeError):
        AttestationRecord(3, 1, 4, 1, b"", b"", None, AuthorizationList())
