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

"""Decode and encode the Android Key Attestation certificate extension."""

from __future__ import annotations

from .authorization import (  # noqa: F401
    KNOWN_TAGS,
    AttestationApplicationId,
    AttestationPackageInfo,
    AuthorizationList,
    AuthorizationListBuilder,
    RootOfTrust,
    decode_authorization_list,
    encode_authorization_list,
)
from .base import (  # noqa: F401
    AttestationError,
    ExtensionNotFound,
    MalformedEncoding,
    MultipleExtensionsFound,
    UnknownField,
    UnknownSecurityLevel,
    ValueOutOfRange,
)
from .config import LENIENT, STRICT, DecodeOptions  # noqa: F401
from .enums import (  # noqa: F401
    Algorithm,
    BlockMode,
    Digest,
    EcCurve,
    KeyOrigin,
    KeyPurpose,
    Padding,
    SecurityLevel,
    UserAuthType,
    VerifiedBootState,
)
from .extension import (  # noqa: F401
    KEY_DESCRIPTION_OID,
    find_attestation_extension,
    find_extension_value,
    get_attestation_extension,
    parse_attestation_record,
)
from .record import (  # noqa: F401
    AttestationRecord,
    decode_attestation_record,
    encode_attestation_record,
)

__version__ = "1.0.0"
