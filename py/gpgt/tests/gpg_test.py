# pytest tests against a real gpg in a throwaway keyring. Linux only.

import os
import re
import shutil
import subprocess

import pytest

import gpgt.config
import gpgt.wrapper
from gpgt.result import ErrorKind
from tests.testbase import TempDirEnvironContextMgr

TEST_USER = "gpgtext-test"
TEST_MAIL = f"{TEST_USER}@example.org"
PASSPHRASE = "correct horse battery staple"

pytestmark = pytest.mark.skipif(shutil.which("gpg") is None, reason="needs the gpg binary")


def create_gpg_key() -> str:
    """Makes a passphrase-less key pair in $GNUPGHOME and returns its fingerprint."""
    subprocess.run(["gpg", "--batch", "--pinentry-mode", "loopback", "--passphrase", "",
                    "--quick-gen-key", f"{TEST_USER} <{TEST_MAIL}>", "default", "default", "never"],
                   check=True, capture_output=True)
    fpr_output = subprocess.check_output(["gpg", "--fingerprint", "--with-colons", TEST_MAIL])
    fpr_lines = [line.decode("ASCII") for line in fpr_output.splitlines() if line.startswith(b"fpr:")]
    mm = re.search(r"fpr:+([\dA-F]+)", fpr_lines[0])
    assert mm
    return mm.group(1)  # the fingerprint-proper only


@pytest.fixture
def keyring():
    with TempDirEnvironContextMgr(GNUPGHOME=None, GPGTEXT_PASSPHRASE=PASSPHRASE) as mgr:
        gnupghome = os.path.join(mgr.newdir, "gnupg")
        os.mkdir(gnupghome, mode=0o700)
        os.environ['GNUPGHOME'] = gnupghome
        try:
            yield gnupghome
        finally:
            subprocess.run(["gpgconf", "--kill", "gpg-agent"], capture_output=True)


def test_empty_keyring(keyring):
    wrapper = gpgt.wrapper.GPGWrapper(gpgt.config.Config())
    assert wrapper.get_num_keys() == 0
    assert wrapper.registry.last_load_result.error_kind == ErrorKind.NO_KEYS_FOUND
    result = wrapper.decrypt("x", "ANYFINGERPRINT")
    assert not result.key_found
    assert not result.success


def test_roundtrip(keyring):
    fingerprint = create_gpg_key()
    wrapper = gpgt.wrapper.GPGWrapper(gpgt.config.Config())
    assert wrapper.get_num_keys() == 1
    details = wrapper.get_keys()[0]
    assert details.fingerprint == fingerprint
    assert details.mail_addresses == (TEST_MAIL,)
    assert wrapper.is_preferred_key(details, "@example.org")
    assert len(wrapper.list_keys(TEST_MAIL)) == wrapper.get_num_keys()
    text = "Grüße\nzweite Zeile\n"
    encrypted = wrapper.encrypt(text, fingerprint, TEST_MAIL)
    assert encrypted.success, encrypted.error_message
    assert encrypted.key_found
    assert encrypted.result_string.startswith("-----BEGIN PGP MESSAGE-----")
    decrypted = wrapper.decrypt(encrypted.result_string, fingerprint)
    assert decrypted.success, decrypted.error_message
    assert decrypted.result_string.replace("\r\n", "\n") == text  # textmode may canonicalize line ends


def test_symmetric(keyring):
    wrapper = gpgt.wrapper.GPGWrapper(gpgt.config.Config(), autoload=False)
    encrypted = wrapper.encrypt("hello", "", "", True)
    assert encrypted.success, encrypted.error_message
    assert not encrypted.key_found
    assert encrypted.result_string.startswith("-----BEGIN PGP MESSAGE-----")


def test_missing_gpg_binary(keyring):
    config = gpgt.config.Config()
    config.gpgbinary = "no-such-gpg-binary"
    wrapper = gpgt.wrapper.GPGWrapper(config)
    assert wrapper.registry.last_load_result.error_kind == ErrorKind.KEY_LISTING_FAILED
    result = wrapper.encrypt("hello", "", "", symmetric=True)
    assert result.error_kind == ErrorKind.ENCRYPTION_FAILED


def test_unreadable_keyring(keyring):
    os.mkdir(os.path.join(keyring, "pubring.kbx"))  # gpg cannot open a directory as its keybox
    wrapper = gpgt.wrapper.GPGWrapper(gpgt.config.Config())
    assert wrapper.get_num_keys() == 0
    assert wrapper.registry.last_load_result.error_kind == ErrorKind.KEY_LISTING_FAILED
    assert wrapper.list_keys("") == []
