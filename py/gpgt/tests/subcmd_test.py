import argparse
import io
import logging

import pytest

import base as b
import gpgt.config
import gpgt.subcmd.decrypt
import gpgt.subcmd.encrypt
import gpgt.subcmd.keys
import tests.testbase as tb

FPR_JANE = "5E1F000000000000000000000000000000000001"
FPR_JOHN = "5E1F000000000000000000000000000000000002"


@pytest.fixture
def backend(monkeypatch) -> tb.FakeBackend:
    """Makes all subcommands talk to one FakeBackend instead of gpg."""
    b._testmode_reset()
    fake = tb.FakeBackend([tb.make_key(FPR_JANE, "Jane Doe <jane@example.org>", expires='1800000000'),
                           tb.make_key(FPR_JOHN, "John Roe <john@example.org>")],
                          secret_fingerprints=[FPR_JANE], passphrase="pw")
    monkeypatch.setattr(gpgt.config, 'from_commandline', lambda configfile: FakeConfig(fake))
    return fake


class FakeConfig:
    search_pattern = ""

    def __init__(self, backend: tb.FakeBackend):
        self.backend = backend

    def make_backend(self) -> tb.FakeBackend:
        return self.backend


def pargs(**kwargs) -> argparse.Namespace:
    return argparse.Namespace(config=None, log="ERROR", **kwargs)


def test_keys(backend, capsys):
    gpgt.subcmd.keys.execute(pargs(pattern=None, mail="jane"))
    out, err = capsys.readouterr()
    assert FPR_JANE in out
    assert FPR_JOHN in out
    assert "*0" in out  # jane is preferred
    assert "*1" not in out
    assert "2027-01-15" in out
    assert "never" in out
    assert backend.calls == [('keylisting', "")]


def test_keys_without_matches(backend, capsys):
    with pytest.raises(b.CriticalError):
        gpgt.subcmd.keys.execute(pargs(pattern="nobody", mail=""))
    out, err = capsys.readouterr()
    assert "No keys found" in out


def test_encrypt_and_decrypt(backend, capsys, monkeypatch):
    monkeypatch.setattr('sys.stdin', io.StringIO("the secret\n"))
    gpgt.subcmd.encrypt.execute(pargs(fingerprint=FPR_JANE, recipient="jane@", symmetric=False, infile=None))
    ciphertext, err = capsys.readouterr()
    assert ciphertext.startswith(tb.ARMOR_HEADER)
    with tb.TempDirEnvironContextMgr():
        b.spit("message.asc", ciphertext)
        gpgt.subcmd.decrypt.execute(pargs(fingerprint=FPR_JANE, infile="message.asc"))
    plaintext, err = capsys.readouterr()
    assert plaintext == "the secret\n"


def test_encrypt_problems(backend, capsys, monkeypatch):
    monkeypatch.setattr('sys.stdin', io.StringIO("the secret\n"))
    with pytest.raises(b.CriticalError):  # --fingerprint missing
        gpgt.subcmd.encrypt.execute(pargs(fingerprint="", recipient="", symmetric=False, infile=None))
    with pytest.raises(b.CriticalError):
        gpgt.subcmd.encrypt.execute(pargs(fingerprint=FPR_JOHN, recipient="jane", symmetric=False, infile=None))
    out, err = capsys.readouterr()
    assert f"no key with fingerprint '{FPR_JOHN}' for recipient 'jane'" in out
    assert b.loglevel == logging.ERROR


def test_symmetric_encrypt(backend, capsys, monkeypatch):
    monkeypatch.setattr('sys.stdin', io.StringIO("hello"))
    gpgt.subcmd.encrypt.execute(pargs(fingerprint="", recipient="", symmetric=True, infile=None))
    out, err = capsys.readouterr()
    assert out.startswith(tb.ARMOR_HEADER)
    assert backend.callnames() == ['encrypt_symmetric']
