"""OperationResult: the terminal report of one encrypt, decrypt, or key-loading call."""
import dataclasses
import enum
import typing as tg

import gpgt.constants as c


class ErrorKind(enum.StrEnum):
    KEY_LISTING_FAILED = 'KEY_LISTING_FAILED'  # backend could not start or continue listing
    KEY_NOT_FOUND = 'KEY_NOT_FOUND'  # no key has the given fingerprint
    DECRYPTION_FAILED = 'DECRYPTION_FAILED'
    ENCRYPTION_FAILED = 'ENCRYPTION_FAILED'  # symmetric or asymmetric
    NO_KEYS_FOUND = 'NO_KEYS_FOUND'  # listing worked but found nothing


@dataclasses.dataclass(frozen=True)
class OperationResult:
    """
    result_string is the armored ciphertext or the decrypted plaintext (empty on failure).
    success means the cryptographic step succeeded.
    key_found stays False on the symmetric encryption path, which never looks for a key.
    error_message accumulates all problems reported during the call.
    """
    result_string: str = ""
    key_found: bool = False
    success: bool = False
    error_message: str = ""
    error_kind: tg.Optional[ErrorKind] = None

    def with_error(self, kind: ErrorKind, message: str) -> 'OperationResult':
        """A copy that has failed with kind; message is appended to error_message."""
        if self.error_message:
            message = f"{self.error_message}{c.ERRORMSG_SEPARATOR}{message}"
        return dataclasses.replace(self, success=False, result_string="",
                                   error_message=message, error_kind=kind)

    def with_payload(self, payload: str) -> 'OperationResult':
        """A copy that has succeeded with payload."""
        return dataclasses.replace(self, success=True, result_string=payload)

    def with_note(self, message: str) -> 'OperationResult':
        """A copy with message appended to error_message; success and payload stay as they are."""
        if self.error_message:
            message = f"{self.error_message}{c.ERRORMSG_SEPARATOR}{message}"
        return dataclasses.replace(self, error_message=message)
