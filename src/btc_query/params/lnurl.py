"""LNURL (LUD-01, LUD-17) and Lightning Address (LUD-16) decoding.

Parsing and URL checks are done by the ``lnurl`` package. No requests are
made: an LNURL is reported as its bech32 form, and a Lightning Address as
the LNURL of its well-known pay endpoint.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import httpx
from lnurl import LnAddress, Lnurl
from lnurl.exceptions import LnurlException

from btc_query.encoding import encode_lnurl
from btc_query.exceptions import InvalidPaymentError
from btc_query.params import PaymentParamsBase

# LUD-17 schemes stand in for https (http for onion services)
_LUD17_RE = re.compile(r"^(?:lnurl[pwc]|keyauth)://", re.IGNORECASE)


@dataclass(frozen=True)
class LnUrl(PaymentParamsBase):
    """An LNURL service endpoint."""

    url: str

    def lnurl(self) -> str:
        return encode_lnurl(self.url)


@dataclass(frozen=True)
class LightningAddress(PaymentParamsBase):
    """A ``user@domain`` Lightning Address."""

    lnaddr: str
    pay_url: str

    def lightning_address(self) -> str:
        return self.lnaddr

    def lnurl(self) -> str:
        return encode_lnurl(self.pay_url)


def _lud17_to_bech32(text: str) -> str:
    url = httpx.URL(text)
    scheme = "http" if url.host.endswith(".onion") else "https"
    return encode_lnurl(str(url.copy_with(scheme=scheme)))


def parse_lnurl(text: str) -> LnUrl:
    """Decode a bech32 LNURL or a LUD-17 ``lnurlp://`` style URL.

    Raises:
        InvalidPaymentError: If the string is not a usable LNURL.
    """
    s = text.strip()
    try:
        if _LUD17_RE.match(s):
            s = _lud17_to_bech32(s)
        url = Lnurl(s).url
    except (httpx.InvalidURL, LnurlException, ValueError) as e:
        raise InvalidPaymentError(text, f"bad lnurl: {e}") from e
    return LnUrl(url=str(url))


def parse_lightning_address(text: str) -> LightningAddress:
    """Decode a ``user@domain`` Lightning Address.

    Raises:
        InvalidPaymentError: If the string is not a Lightning Address.
    """
    s = text.strip().lower()
    try:
        address = LnAddress(s)
    except (LnurlException, ValueError) as e:
        raise InvalidPaymentError(text, f"not a lightning address: {e}") from e
    return LightningAddress(lnaddr=s, pay_url=str(address.url))
