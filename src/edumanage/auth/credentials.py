"""Password hashing and verification.

Stored credentials come in several formats. Each format has its own verifier;
the checker picks the one that recognizes the stored value. New passwords are
always hashed with werkzeug.
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import re
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


class CredentialVerifier(ABC):
    scheme: str = "base"

    @abstractmethod
    def handles(self, stored: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def verify(self, supplied: str, stored: str) -> bool:
        raise NotImplementedError


class WerkzeugHashVerifier(CredentialVerifier):
    """``method$salt$hash`` strings produced by ``generate_password_hash``."""

    scheme = "werkzeug"
    methods = ("scrypt", "pbkdf2")

    def handles(self, stored: str) -> bool:
        method = stored.split("$", 1)[0]
        return "$" in stored and method.split(":", 1)[0] in self.methods

    def verify(self, supplied: str, stored: str) -> bool:
        try:
            return check_password_hash(stored, supplied)
        except ValueError:
            # corrupted hash parameters
            logger.warning("Unreadable %s credential record", self.scheme)
            return False


class ScryptHexVerifier(CredentialVerifier):
    """``<hex digest>.<salt>`` records written by the previous back office.

    Digest is scrypt(password, salt) with N=16384, r=8, p=1 and a 64-byte key;
    the salt is used as its literal text.
    """

    scheme = "scrypt-hex"
    n = 16384
    r = 8
    p = 1
    key_length = 64

    def handles(self, stored: str) -> bool:
        digest, sep, salt = stored.partition(".")
        return bool(sep and salt) and len(digest) == self.key_length * 2 and bool(_HEX_RE.match(digest))

    def verify(self, supplied: str, stored: str) -> bool:
        digest, _, salt = stored.partition(".")
        derived = hashlib.scrypt(
            supplied.encode("utf-8"),
            salt=salt.encode("utf-8"),
            n=self.n,
            r=self.r,
            p=self.p,
            dklen=self.key_length,
        )
        return hmac.compare_digest(derived.hex(), digest.lower())


class LegacyFixedCredentialVerifier(CredentialVerifier):
    """Placeholder ``$2a$``/``$2b$`` records that were never real hashes.

    The old system accepted one fixed password for them. That stays possible
    only when explicitly enabled, and every use is logged so the accounts get
    migrated.
    """

    scheme = "legacy-fixed"

    def __init__(self, fixed_password: str, *, enabled: bool = False):
        self._fixed_password = fixed_password
        self._enabled = enabled

    def handles(self, stored: str) -> bool:
        return stored.startswith(("$2a$", "$2b$"))

    def verify(self, supplied: str, stored: str) -> bool:
        if not self._enabled or not self._fixed_password:
            logger.warning("Rejected login against a legacy placeholder credential (legacy credentials disabled)")
            return False
        ok = hmac.compare_digest(supplied.encode("utf-8"), self._fixed_password.encode("utf-8"))
        if ok:
            logger.warning("Accepted legacy fixed credential; this account's password must be reset")
        return ok


class CredentialChecker:
    def __init__(self, verifiers: Sequence[CredentialVerifier]):
        self._verifiers = list(verifiers)

    @classmethod
    def default(cls, *, legacy_enabled: bool = False, legacy_password: str = "") -> "CredentialChecker":
        return cls(
            [
                WerkzeugHashVerifier(),
                ScryptHexVerifier(),
                LegacyFixedCredentialVerifier(legacy_password, enabled=legacy_enabled),
            ]
        )

    def hash_password(self, password: str) -> str:
        return generate_password_hash(password)

    def scheme_of(self, stored: str) -> Optional[str]:
        verifier = self._find(stored)
        return verifier.scheme if verifier else None

    def verify(self, supplied: str, stored: Optional[str]) -> bool:
        if not supplied or not stored:
            return False
        verifier = self._find(stored)
        if verifier is None:
            logger.warning("Unrecognized credential format; login rejected")
            return False
        return verifier.verify(supplied, stored)

    def _find(self, stored: str) -> Optional[CredentialVerifier]:
        for verifier in self._verifiers:
            if verifier.handles(stored):
                return verifier
        return None
