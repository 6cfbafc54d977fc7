"""PasswordHasher: salted argon2id hashing and constant-time verification."""

from __future__ import annotations

import base64
import binascii

from argon2 import PasswordHasher as Argon2Hasher, extract_parameters
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from domain.exceptions import HashFormatError, InvalidInputError

DEFAULT_TIME_COST = 3
DEFAULT_MEMORY_COST = 65536  # KiB
DEFAULT_PARALLELISM = 4


class PasswordHasher:
    """One-way password hashing.

    Every hash gets a fresh random salt, so hashing the same password twice
    yields different strings of the same length. Both operations are slow by
    design; async callers should run them in a worker thread.
    """

    def __init__(
        self,
        time_cost: int = DEFAULT_TIME_COST,
        memory_cost: int = DEFAULT_MEMORY_COST,
        parallelism: int = DEFAULT_PARALLELISM,
    ) -> None:
        self._ph = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    @staticmethod
    def _check_plaintext(plaintext: object) -> str:
        if not isinstance(plaintext, str) or not plaintext:
            raise InvalidInputError("password must be a non-empty string")
        return plaintext

    def hash(self, plaintext: str) -> str:
        return self._ph.hash(self._check_plaintext(plaintext))

    def verify(self, plaintext: str, hashed_password: str) -> bool:
        """Return True when plaintext matches the hash, False otherwise.

        Raises HashFormatError if hashed_password is not a decodable argon2 hash.
        """
        if not isinstance(plaintext, str):
            raise InvalidInputError("password must be a string")
        self._check_hash_format(hashed_password)

        try:
            return self._ph.verify(hashed_password, plaintext)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as e:
            raise HashFormatError("unrecognized password hash encoding") from e

    def needs_rehash(self, hashed_password: str) -> bool:
        """True when the hash was made with different cost parameters."""
        self._check_hash_format(hashed_password)
        return self._ph.check_needs_rehash(hashed_password)

    @staticmethod
    def _check_hash_format(hashed_password: object) -> None:
        if not isinstance(hashed_password, str) or not hashed_password:
            raise HashFormatError("unrecognized password hash encoding")
        try:
            extract_parameters(hashed_password)
            # salt and digest are unpadded standard base64
            for segment in hashed_password.rsplit("$", 2)[-2:]:
                base64.b64decode(segment + "=" * (-len(segment) % 4), validate=True)
        except (InvalidHashError, binascii.Error, ValueError) as e:
            raise HashFormatError("unrecognized password hash encoding") from e
