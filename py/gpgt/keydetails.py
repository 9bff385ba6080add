"""KeyDetails: backend-independent snapshot of one OpenPGP key as seen by clients."""
import dataclasses
import datetime as dt
import re
import typing as tg

import base as b
import gpgt.backend

MAIL_IN_UID_REGEXP = r"<(?P<mail>[^<>]*)>"  # as in 'Jane Doe (comment) <jane@example.org>'


@dataclasses.dataclass(frozen=True)
class KeyDetails:
    fingerprint: str
    mail_addresses: tuple[str, ...] = ()  # in the order of the uids
    uids: tuple[str, ...] = ()
    keyid: str = ""
    algorithm: str = ""  # gpg's numeric algorithm id, e.g. '1' for RSA, '22' for EdDSA
    length: int = 0  # in bits
    creation_date: tg.Optional[dt.datetime] = None
    expiry_date: tg.Optional[dt.datetime] = None  # None means: never expires
    trust: str = ""  # gpg validity letter: 'u' ultimate, 'f' full, '-' unknown, ...

    @property
    def name(self) -> str:
        """The first uid without its mail address part, for display."""
        if not self.uids:
            return ""
        return re.sub(MAIL_IN_UID_REGEXP, "", self.uids[0]).strip()


KeyDetailsLoader = tg.Callable[[gpgt.backend.Key], KeyDetails]


def load_keydetails(key: gpgt.backend.Key) -> KeyDetails:
    """Builds KeyDetails from one python-gnupg key dict."""
    uids = tuple(key.get('uids', []))
    return KeyDetails(fingerprint=key.get('fingerprint', "") or "",
                      mail_addresses=tuple(mail for mail in map(mail_of_uid, uids) if mail),
                      uids=uids,
                      keyid=key.get('keyid', ""),
                      algorithm=key.get('algo', ""),
                      length=_as_int(key.get('length')),
                      creation_date=_as_datetime(key.get('date')),
                      expiry_date=_as_datetime(key.get('expires')),
                      trust=key.get('trust', ""))


def mail_of_uid(uid: str) -> str:
    """
    'Jane Doe <jane@example.org>' -> 'jane@example.org'; a bare 'jane@example.org' is taken as is.
    Returns an empty string for uids without a mail address.
    """
    mm = re.search(MAIL_IN_UID_REGEXP, uid)
    if mm:
        return mm.group('mail').strip()
    uid = uid.strip()
    if '@' in uid and ' ' not in uid:
        return uid
    return ""


def _as_int(raw: tg.Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def _as_datetime(raw: b.OStr) -> tg.Optional[dt.datetime]:
    """gpg --with-colons gives seconds since epoch; empty means none."""
    if not raw or not raw.isdigit():
        return None
    return dt.datetime.fromtimestamp(int(raw), tz=dt.timezone.utc)
