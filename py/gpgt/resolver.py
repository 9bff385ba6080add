"""KeyResolver: pick the one key that matches a fingerprint or a recipient mail address."""
import typing as tg

import gpgt.registry as r

Key = r.Key
KeyDetails = r.KeyDetails


def is_preferred_key(details: KeyDetails, mail_address: str) -> bool:
    """True iff mail_address is a substring of one of the key's mail addresses (case matters)."""
    return any(mail_address in candidate for candidate in details.mail_addresses)


def first_with_fingerprint(keys: tg.Iterable[Key], fingerprint: str) -> tg.Optional[Key]:
    """First key in backend order whose fingerprint equals fingerprint exactly."""
    for key in keys:
        if key['fingerprint'] == fingerprint:
            return key
    return None


class KeyResolver:
    registry: r.KeyRegistry

    def __init__(self, registry: r.KeyRegistry):
        self.registry = registry

    def key_for_fingerprint(self, fingerprint: str, recipient_mail: str = "") -> tg.Optional[Key]:
        """Lists the keys for recipient_mail afresh and returns the first with this fingerprint."""
        return first_with_fingerprint(self.registry.list_keys(recipient_mail), fingerprint)

    def preferred_keys(self, mail_address: str) -> list[KeyDetails]:
        """The loaded keys that have a mail address containing mail_address, in registry order."""
        return [details for details in self.registry.get_keys()
                if is_preferred_key(details, mail_address)]

    is_preferred_key = staticmethod(is_preferred_key)
