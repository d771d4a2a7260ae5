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

"""Locate the key attestation extension in a certificate or chain."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from cryptography import x509
from cryptography.hazmat.backends import default_backend

from .base import ExtensionNotFound, MultipleExtensionsFound
from .config import DecodeOptions
from .record import AttestationRecord, decode_attestation_record

logger = logging.getLogger(__name__)

KEY_DESCRIPTION_OID = "1.3.6.1.4.1.11129.2.1.17"
OID_KEY_DESCRIPTION = x509.ObjectIdentifier(KEY_DESCRIPTION_OID)

CertificateLike = Union[x509.Certificate, bytes, bytearray, memoryview]


def find_extension_value(
    extensions: Iterable[Tuple[str, bytes]], oid: str = KEY_DESCRIPTION_OID
) -> bytes:
    """Return the value of the one extension in ``extensions`` matching ``oid``.

    :param extensions: ``(dotted_oid, value)`` pairs, where value is the
        content of the extension's OCTET STRING.
    """

    matches = [bytes(value) for ext_oid, value in extensions if ext_oid == oid]
    if not matches:
        raise ExtensionNotFound(f"Certificate has no extension {oid}")
    if len(matches) > 1:
        raise MultipleExtensionsFound(
            f"Certificate has {len(matches)} extensions {oid}"
        )
    return matches[0]


def load_certificate(certificate: CertificateLike) -> x509.Certificate:
    """Accept a parsed certificate, or DER or PEM bytes."""

    if isinstance(certificate, x509.Certificate):
        return certificate
    if isinstance(certificate, (bytes, bytearray, memoryview)):
        raw = bytes(certificate)
        if raw.lstrip().startswith(b"-----BEGIN"):
            return x509.load_pem_x509_certificate(raw, default_backend())
        return x509.load_der_x509_certificate(raw, default_backend())
    raise TypeError(
        f"Expected a certificate or certificate bytes, not {type(certificate).__name__}"
    )


def _certificate_extensions(cert: x509.Certificate) -> Iterator[Tuple[str, bytes]]:
    # cryptography does not interpret the attestation extension, so it is
    # always surfaced as an UnrecognizedExtension carrying the raw value.
    try:
        extensions = cert.extensions
    except x509.DuplicateExtension as e:
        if e.oid == OID_KEY_DESCRIPTION:
            raise MultipleExtensionsFound(
                f"Certificate has more than one extension {KEY_DESCRIPTION_OID}"
            ) from e
        raise
    for ext in extensions:
        if isinstance(ext.value, x509.UnrecognizedExtension):
            yield ext.oid.dotted_string, ext.value.value


def get_attestation_extension(certificate: CertificateLike) -> bytes:
    """Return the raw KeyDescription bytes carried by one certificate."""

    return find_extension_value(_certificate_extensions(load_certificate(certificate)))


def _as_chain(
    certificates: Union[CertificateLike, Sequence[CertificateLike]]
) -> List[x509.Certificate]:
    if isinstance(certificates, (x509.Certificate, bytes, bytearray, memoryview)):
        return [load_certificate(certificates)]
    return [load_certificate(c) for c in certificates]


def find_attestation_extension(
    certificates: Union[CertificateLike, Sequence[CertificateLike]]
) -> bytes:
    """Return the KeyDescription bytes from a chain ordered leaf first.

    The extension closest to the root wins. A key attested by the secure
    environment can sign further certificates of its own, so any record
    found below the first attested certificate is not trustworthy.
    """

    chain = _as_chain(certificates)
    for index in range(len(chain) - 1, -1, -1):
        try:
            value = get_attestation_extension(chain[index])
        except ExtensionNotFound:
            continue
        logger.debug(
            "Using attestation extension from certificate %d of %d",
            index,
            len(chain),
        )
        return value
    raise ExtensionNotFound(
        "Couldn't find the keystore attestation extension data in the chain"
    )


def parse_attestation_record(
    certificates: Union[CertificateLike, Sequence[CertificateLike]],
    options: Optional[DecodeOptions] = None,
    *,
    strict: Optional[bool] = None,
) -> AttestationRecord:
    """Locate and decode the attestation record of a certificate or chain."""

    return decode_attestation_record(
        find_attestation_extension(certificates), options, strict=strict
    )
