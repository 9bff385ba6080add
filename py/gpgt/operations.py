"""
CryptoOperations: one decrypt or one encrypt call against gpg, packaged as an OperationResult.

Every call opens its own backend session and closes it before returning.
Nothing is retried and no exception leaves decrypt() or encrypt():
all problems end up in the returned OperationResult.
"""
import base as b
import gpgt.backend
import gpgt.constants as c
import gpgt.resolver
from gpgt.result import ErrorKind, OperationResult


class CryptoOperations:
    backend: gpgt.backend.GnupgBackend
    resolver: gpgt.resolver.KeyResolver

    def __init__(self, backend: gpgt.backend.GnupgBackend, resolver: gpgt.resolver.KeyResolver):
        self.backend = backend
        self.resolver = resolver

    def decrypt(self, input_text: str, fingerprint: str) -> OperationResult:
        """Decrypts armored input_text, provided the key with this fingerprint exists."""
        result = OperationResult()
        ciphertext = input_text.encode(c.TEXT_ENCODING)  # bytes: immutable during the gpg call
        try:
            with self.backend.session(armor=True, textmode=True) as session:
                key = session.key(fingerprint)
                if key is None:
                    return self._failed(result, ErrorKind.KEY_NOT_FOUND,
                                        f"Error finding key: no key with fingerprint '{fingerprint}'")
                result = OperationResult(key_found=True)
                try:
                    plaintext = session.decrypt(ciphertext)
                except gpgt.backend.BackendError as ex:
                    return self._failed(result, ErrorKind.DECRYPTION_FAILED, f"Decryption failed: {ex}")
        except gpgt.backend.BackendError as ex:  # session start or key lookup
            return self._failed(result, ErrorKind.KEY_LISTING_FAILED, f"Error finding key: {ex}")
        try:
            text = plaintext.decode(c.TEXT_ENCODING)
        except UnicodeDecodeError as ex:
            message = (f"Decrypted data is not valid {c.TEXT_ENCODING} ({ex.reason} at byte {ex.start}),"
                       " undecodable bytes were replaced")
            b.warning(message)
            result = result.with_note(message)
            text = plaintext.decode(c.TEXT_ENCODING, errors='replace')
        return result.with_payload(text)

    def encrypt(self, input_text: str, fingerprint: str, recipient_mail: str,
                symmetric=False) -> OperationResult:
        """
        Symmetric: encrypts with the backend's passphrase, never looks at keys.
        Otherwise: encrypts for the first key that matches recipient_mail and has this fingerprint,
        trusting that key's validity.
        Returns armored ciphertext.
        """
        plaintext = input_text.encode(c.TEXT_ENCODING)
        if symmetric:
            return self._encrypt_symmetric(plaintext)
        result = OperationResult()
        key = self.resolver.key_for_fingerprint(fingerprint, recipient_mail)
        if key is None:
            return self._failed(result, ErrorKind.KEY_NOT_FOUND,
                                f"Error finding key: no key with fingerprint '{fingerprint}' "
                                f"for recipient '{recipient_mail}'")
        result = OperationResult(key_found=True)
        selected_keys = [key]
        try:
            with self.backend.session(armor=True, textmode=True) as session:
                ciphertext = session.encrypt(selected_keys, plaintext, always_trust=True)
        except gpgt.backend.BackendError as ex:
            return self._failed(result, ErrorKind.ENCRYPTION_FAILED, f"Encryption failed: {ex}")
        return result.with_payload(ciphertext.decode(c.TEXT_ENCODING))

    def _encrypt_symmetric(self, plaintext: bytes) -> OperationResult:
        result = OperationResult()
        try:
            with self.backend.session(armor=True, textmode=True) as session:
                ciphertext = session.encrypt_symmetric(plaintext)
        except gpgt.backend.BackendError as ex:
            return self._failed(result, ErrorKind.ENCRYPTION_FAILED, f"Symmetric encryption failed: {ex}")
        return result.with_payload(ciphertext.decode(c.TEXT_ENCODING))

    @staticmethod
    def _failed(result: OperationResult, kind: ErrorKind, message: str) -> OperationResult:
        b.warning(message)
        return result.with_error(kind, message)
