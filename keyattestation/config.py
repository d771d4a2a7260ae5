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

"""Decode options and their environment defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

STRICT_ENV_VAR = "KEYATTESTATION_STRICT"


def _env_flag(name: str) -> Optional[bool]:
    """Return ``True`` or ``False`` when the named env var is explicitly set."""

    raw_value = os.environ.get(name)
    if raw_value is None:
        return None

    normalised = raw_value.strip().lower()
    if normalised in {"", "0", "false", "off", "no"}:
        return False
    return True


@dataclass(frozen=True)
class DecodeOptions:
    """Controls how schema-unknown data is handled while decoding.

    In strict mode an unknown tag number or enumerated value raises
    :class:`~keyattestation.base.UnknownField`. In lenient mode the raw value
    is retained so that records from newer firmware still decode and
    re-encode without loss.
    """

    strict: bool = False

    @classmethod
    def from_env(cls) -> DecodeOptions:
        strict = _env_flag(STRICT_ENV_VAR)
        return cls(strict=bool(strict))


STRICT = DecodeOptions(strict=True)
LENIENT = DecodeOptions(strict=False)


def resolve_options(
    options: Optional[DecodeOptions] = None, strict: Optional[bool] = None
) -> DecodeOptions:
    """Pick the effective options for a decode call.

    An explicit ``strict`` flag wins over ``options``, which wins over the
    environment.
    """

    if strict is not None:
        return STRICT if strict else LENIENT
    if options is not None:
        return options
    return DecodeOptions.from_env()
