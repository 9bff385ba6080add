"""Represent and handle the contents of the optional gpgtext.yaml config file."""
import os

import base as b
import gpgt.backend
import gpgt.constants as c


class Config:
    """
    Settings for talking to gpg.
    gnupghome: keyring directory; $GNUPGHOME wins over the file, None means gpg's default.
    gpgbinary: name or path of the gpg executable.
    passphrase_env: name of the environment variable that holds the passphrase
      for symmetric encryption and for secret keys. The passphrase itself never lives in the file.
    search_pattern: default pattern for listing keys.
    """
    configfile: b.OStr = None
    gnupghome: b.OStr = None
    gpgbinary: str = c.GPGBINARY_DEFAULT
    passphrase_env: str = c.PASSPHRASE_ENV_DEFAULT
    search_pattern: str = ""

    def __init__(self, configfile: b.OStr = None, must_exist=False):
        if configfile and os.path.exists(configfile):
            self.configfile = configfile
            self._read(configfile)
        elif must_exist:
            b.critical(f"config file '{configfile}' does not exist")
        self.gnupghome = os.environ.get(c.GNUPGHOME_ENV) or self.gnupghome
        if self.gnupghome:
            self.gnupghome = b.expandvars(os.path.expanduser(self.gnupghome), self.configfile or "env")

    @property
    def passphrase(self) -> b.OStr:
        return os.environ.get(self.passphrase_env) if self.passphrase_env else None

    def make_backend(self) -> gpgt.backend.GnupgBackend:
        return gpgt.backend.GnupgBackend(gnupghome=self.gnupghome, gpgbinary=self.gpgbinary,
                                         passphrase=self.passphrase)

    def _read(self, configfile: str):
        configdict = b.slurp_yaml(configfile) or dict()
        if not isinstance(configdict, dict):
            b.critical("must contain a YAML mapping", file=configfile)
        b.copyattrs(configfile, configdict, self,
                    mustcopy_attrs='',
                    cancopy_attrs='gnupghome, gpgbinary, passphrase_env, search_pattern')
        for attr in ('gpgbinary', 'passphrase_env', 'search_pattern'):
            if getattr(self, attr) is None:  # explicit null in the file
                delattr(self, attr)  # fall back to the class default
        for attr in ('gnupghome', 'gpgbinary', 'passphrase_env', 'search_pattern'):
            value = getattr(self, attr)
            if value is not None and not isinstance(value, str):
                b.error(f"'{attr}' should be a string (is '{value}')", file=configfile)
                delattr(self, attr)


def from_commandline(configfile: b.OStr) -> Config:
    """Config from an explicit --config file (which must exist) or from the default file if there is one."""
    if configfile:
        return Config(configfile, must_exist=True)
    return Config(c.CONFIG_FILENAME)
