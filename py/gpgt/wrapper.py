"""
GPGWrapper: everything an application needs for OpenPGP text encryption in one object.

Typical use:
    wrapper = GPGWrapper(Config("gpgtext.yaml"))  # lists the keyring right away
    for details in wrapper.get_keys(): ...
    result = wrapper.encrypt(text, details.fingerprint, "jane@example.org")
    if not result.success: show(result.error_message)
"""
import typing as tg

import gpgt.backend
import gpgt.config
import gpgt.keydetails
import gpgt.operations
import gpgt.registry
import gpgt.resolver
from gpgt.result import OperationResult

KeyDetails = gpgt.keydetails.KeyDetails


class GPGWrapper:
    registry: gpgt.registry.KeyRegistry
    resolver: gpgt.resolver.KeyResolver
    operations: gpgt.operations.CryptoOperations

    def __init__(self, config: tg.Optional[gpgt.config.Config] = None,
                 backend: tg.Optional[gpgt.backend.GnupgBackend] = None,
                 loader: gpgt.keydetails.KeyDetailsLoader = gpgt.keydetails.load_keydetails,
                 autoload=True):
        """
        Uses backend if given, else one made from config (default: Config()).
        With autoload, the whole keyring is listed during construction, which blocks until gpg is done.
        """
        if backend is None:
            backend = (config or gpgt.config.Config()).make_backend()
        self.registry = gpgt.registry.KeyRegistry(backend, loader=loader, autoload=autoload)
        self.resolver = gpgt.resolver.KeyResolver(self.registry)
        self.operations = gpgt.operations.CryptoOperations(backend, self.resolver)

    def list_keys(self, search_pattern: str = "") -> list[gpgt.backend.Key]:
        return self.registry.list_keys(search_pattern)

    def load_keys(self, search_pattern: str = "") -> OperationResult:
        return self.registry.load_keys(search_pattern)

    def get_keys(self) -> tuple[KeyDetails, ...]:
        return self.registry.get_keys()

    def get_num_keys(self) -> int:
        return self.registry.get_num_keys()

    def is_preferred_key(self, details: KeyDetails, mail_address: str) -> bool:
        return gpgt.resolver.is_preferred_key(details, mail_address)

    def decrypt(self, input_text: str, fingerprint: str) -> OperationResult:
        return self.operations.decrypt(input_text, fingerprint)

    def encrypt(self, input_text: str, fingerprint: str, recipient_mail: str,
                symmetric=False) -> OperationResult:
        return self.operations.encrypt(input_text, fingerprint, recipient_mail, symmetric)

    @property
    def selected_key_index(self) -> int:
        return self.registry.selected_key_index

    @selected_key_index.setter
    def selected_key_index(self, new_index: int):
        self.registry.selected_key_index = new_index

    def selected_key(self) -> tg.Optional[KeyDetails]:
        return self.registry.selected_key()
