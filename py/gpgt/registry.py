"""KeyRegistry: discover the OpenPGP keys on this host and keep them as KeyDetails."""
import typing as tg

import base as b
import gpgt.backend
import gpgt.constants as c
import gpgt.keydetails
from gpgt.result import ErrorKind, OperationResult

Key = gpgt.backend.Key
KeyDetails = gpgt.keydetails.KeyDetails


class KeyRegistry:
    """
    Owns the list of KeyDetails from the most recent load_keys().
    The list is replaced wholesale on each load and is not synchronized:
    callers using several threads must serialize load_keys() and get_keys() themselves.
    """
    backend: gpgt.backend.GnupgBackend
    loader: gpgt.keydetails.KeyDetailsLoader
    keys: list[KeyDetails]
    last_load_result: OperationResult
    _selected_key_index: int

    def __init__(self, backend: gpgt.backend.GnupgBackend,
                 loader: gpgt.keydetails.KeyDetailsLoader = gpgt.keydetails.load_keydetails,
                 autoload=True):
        """
        With autoload, this runs load_keys("") right away, which calls gpg
        and blocks until gpg has listed the entire keyring.
        """
        self.backend = backend
        self.loader = loader
        self.keys = []
        self.last_load_result = OperationResult()
        self._selected_key_index = 0
        if autoload:
            self.load_keys("")

    def list_keys(self, search_pattern: str = "") -> list[Key]:
        """
        Fresh listing of the public keys matching search_pattern (empty: all keys).
        Returns an empty list if the listing cannot even start and the keys
        collected so far if it breaks off.
        """
        keys, problem = self._collect_keys(search_pattern)
        if problem:
            b.debug(f"list_keys('{search_pattern}'): {problem}")
        return keys

    def load_keys(self, search_pattern: str = "") -> OperationResult:
        """
        Replaces the registry contents by the keys matching search_pattern.
        Keys the loader rejects with KeyError, TypeError, or ValueError are skipped.
        Any other exception from the loader propagates and leaves the registry empty
        with a last_load_result that reports no success.
        """
        self.keys.clear()
        self.last_load_result = OperationResult()
        keys, problem = self._collect_keys(search_pattern)
        if problem and keys:
            b.warning(f"key listing broke off after {len(keys)} key{b.plural_s(len(keys))}: {problem}")
        loaded = []
        for key in keys:
            try:
                details = self.loader(key)
            except (KeyError, TypeError, ValueError) as ex:
                b.warning(f"ignoring key that cannot be read: {ex!r}")
                continue
            if not details.fingerprint:
                b.warning(f"ignoring key without fingerprint: {details.uids}")
                continue
            loaded.append(details)
        self.keys.extend(loaded)
        if self.keys:
            result = OperationResult(key_found=True, success=True)
        elif problem and not keys:
            result = OperationResult().with_error(ErrorKind.KEY_LISTING_FAILED,
                                                  f"{c.MSG_KEYLISTING_FAILED}: {problem.text}")
        else:
            result = OperationResult().with_error(ErrorKind.NO_KEYS_FOUND, c.MSG_NO_KEYS_FOUND)
        b.debug(f"load_keys('{search_pattern}'): {len(self.keys)} key{b.plural_s(len(self.keys))}"
                f" {result.error_message}")
        self.last_load_result = result
        return result

    def get_keys(self) -> tuple[KeyDetails, ...]:
        return tuple(self.keys)

    def get_num_keys(self) -> int:
        return len(self.keys)

    def find_keydetails(self, fingerprint: str) -> tg.Optional[KeyDetails]:
        for details in self.keys:
            if details.fingerprint == fingerprint:
                return details
        return None

    @property
    def selected_key_index(self) -> int:
        """Cursor into get_keys(); not checked against the current number of keys."""
        return self._selected_key_index

    @selected_key_index.setter
    def selected_key_index(self, new_index: int):
        self._selected_key_index = new_index

    def selected_key(self) -> tg.Optional[KeyDetails]:
        """The KeyDetails at selected_key_index or None if the index is out of range."""
        if 0 <= self._selected_key_index < len(self.keys):
            return self.keys[self._selected_key_index]
        return None

    def _collect_keys(self, search_pattern: str) -> tuple[list[Key], tg.Optional[gpgt.backend.BackendError]]:
        """All keys the backend delivers plus the problem that stopped the listing, if any."""
        keys = []
        try:
            with self.backend.session() as session:
                for key in session.keylisting(search_pattern, secret_only=False):
                    keys.append(key)
        except gpgt.backend.BackendError as ex:
            return keys, ex
        return keys, None
