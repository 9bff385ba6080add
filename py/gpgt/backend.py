"""
Simple session layer over python-gnupg for listing keys and en-/decrypting bytes.

One gnupg.GPG instance is one session. Sessions are created per operation by
GnupgBackend.session() and never shared, so independent calls do not see
each other's state.
Failures are reported as BackendError; turning them into caller-friendly
results is the business of gpgt.operations and gpgt.registry.
"""
import contextlib
import typing as tg

import gnupg

import base as b
import gpgt.constants as c

Key = b.StrAnyDict  # one entry of gnupg.ListKeys: 'fingerprint', 'uids', 'keyid', 'algo', ...
NO_MATCH_MARKERS = ("No public key", "No secret key", "not found")  # gpg stderr when a pattern matches nothing


class BackendError(Exception):
    """A failed gpg operation: gpg's return code (or ERRORCODE_UNKNOWN) plus gpg's status text."""
    def __init__(self, code: int, text: str):
        super().__init__(text)
        self.code = code
        self.text = text

    def __str__(self):
        return f"{self.text} (code {self.code})"


class Session:
    """Operations of a single gnupg.GPG instance. Obtain one via GnupgBackend.session()."""
    gpg: tg.Optional[gnupg.GPG]
    armor: bool
    textmode: bool
    passphrase: b.OStr

    def __init__(self, gpg: gnupg.GPG, armor: bool, textmode: bool, passphrase: b.OStr):
        self.gpg = gpg
        self.armor = armor
        self.textmode = textmode
        self.passphrase = passphrase

    @property
    def is_open(self) -> bool:
        return self.gpg is not None

    def close(self):
        self.gpg = None  # gnupg.GPG holds no OS resources between calls

    def keylisting(self, pattern: str, secret_only=False) -> tg.Iterator[Key]:
        """
        Yields the public (or secret) keys matching pattern; empty pattern means all keys.
        Raises BackendError after the last key if gpg reported a failure.
        """
        keys, problem = self._listing(pattern or None, secret_only)
        b.debug(f"keylisting('{pattern}'): {len(keys)} key{b.plural_s(len(keys))}")
        yield from keys
        if problem:
            raise problem

    def key(self, fingerprint: str) -> tg.Optional[Key]:
        """The public key whose fingerprint is exactly this one, or None."""
        if not fingerprint:
            return None
        keys, problem = self._listing([fingerprint], secret_only=False)
        for key in keys:
            if key['fingerprint'] == fingerprint:
                return key
        if problem:
            raise problem
        return None

    def encrypt_symmetric(self, data: bytes) -> bytes:
        gpg = self._the_gpg()
        encrypted = gpg.encrypt(data, None, symmetric=True, passphrase=self.passphrase,
                                armor=self.armor, extra_args=self._extra_args())
        _check_gpg_result("symmetric encryption", encrypted)
        return encrypted.data

    def encrypt(self, recipients: tg.Sequence[Key], data: bytes, always_trust: bool) -> bytes:
        """Encrypts data asymmetrically for each of the recipients' keys."""
        gpg = self._the_gpg()
        fingerprints = [key['fingerprint'] for key in recipients]
        encrypted = gpg.encrypt(data, fingerprints, always_trust=always_trust,
                                armor=self.armor, extra_args=self._extra_args())
        _check_gpg_result("encryption", encrypted)
        return encrypted.data

    def decrypt(self, data: bytes) -> bytes:
        """Decrypts data if the local keyring has a matching secret key (or the passphrase fits)."""
        gpg = self._the_gpg()
        decrypted = gpg.decrypt(data, passphrase=self.passphrase)
        _check_gpg_result("decryption", decrypted)
        return decrypted.data

    def _listing(self, patterns: tg.Union[str, list[str], None],
                 secret_only: bool) -> tuple[list[Key], tg.Optional[BackendError]]:
        """gpg's key listing plus the failure gpg reported, if any. Matching nothing is no failure."""
        gpg = self._the_gpg()
        listing = gpg.list_keys(secret=secret_only, keys=patterns)
        code = getattr(listing, 'returncode', None)
        if not code:
            return list(listing), None
        stderr = getattr(listing, 'stderr', "") or ""
        if patterns and any(marker in stderr for marker in NO_MATCH_MARKERS):
            return list(listing), None
        b.debug(f"gpg key listing failed, stderr:\n{stderr}")
        messages = [line[len("gpg: "):] for line in stderr.splitlines() if line.startswith("gpg: ")]
        return list(listing), BackendError(code, messages[-1] if messages else "key listing failed")

    def _extra_args(self) -> list[str]:
        return ['--textmode'] if self.textmode else []

    def _the_gpg(self) -> gnupg.GPG:
        if self.gpg is None:
            raise BackendError(c.ERRORCODE_UNKNOWN, "session is closed")
        return self.gpg


class GnupgBackend:
    """Creates gpg sessions for a given keyring (GNUPGHOME) and gpg binary."""
    gnupghome: b.OStr
    gpgbinary: str
    passphrase: b.OStr

    def __init__(self, gnupghome: b.OStr = None, gpgbinary: str = c.GPGBINARY_DEFAULT,
                 passphrase: b.OStr = None):
        self.gnupghome = gnupghome  # None means gpg's default, usually ~/.gnupg
        self.gpgbinary = gpgbinary
        self.passphrase = passphrase

    @contextlib.contextmanager
    def session(self, armor=False, textmode=False) -> tg.Iterator[Session]:
        """Context manager for a fresh Session that is closed on every exit path."""
        try:
            gpg = gnupg.GPG(gpgbinary=self.gpgbinary, gnupghome=self.gnupghome)
        except (OSError, ValueError) as ex:  # gpg binary missing, gnupghome unusable
            raise BackendError(c.ERRORCODE_UNKNOWN, f"cannot start gpg: {ex}") from ex
        gpg.encoding = 'utf-8'
        b.debug(f"gpg session start: home={self.gnupghome or '(default)'}, armor={armor}, textmode={textmode}")
        session = Session(gpg, armor=armor, textmode=textmode, passphrase=self.passphrase)
        try:
            yield session
        finally:
            session.close()
            b.debug("gpg session end")


def _check_gpg_result(operation: str, result: gnupg.Crypt):
    """Raises BackendError if result is not ok."""
    if result.ok:
        return
    stderr = getattr(result, 'stderr', "") or ""
    b.debug(f"gpg {operation} failed, stderr:\n{stderr}")
    status = getattr(result, 'status', None) or f"{operation} failed"
    code = getattr(result, 'returncode', None)
    raise BackendError(c.ERRORCODE_UNKNOWN if code is None else code, status)
