"""On-chain bitcoin addresses, read through lwk."""

from __future__ import annotations

from dataclasses import dataclass

import base58
from lwk import PaymentKind

from btc_query.encoding import encode_segwit_address
from btc_query.exceptions import InvalidPaymentError
from btc_query.params import Network, PaymentParamsBase, read_payment

_NETWORK_HRPS: dict[Network, str] = {
    Network.BITCOIN: "bc",
    Network.TESTNET: "tb",
    Network.SIGNET: "tb",
    Network.REGTEST: "bcrt",
}
_SEGWIT_PREFIXES = ("bc1", "tb1", "bcrt1")


@dataclass(frozen=True)
class BitcoinAddress(PaymentParamsBase):
    """A validated on-chain address."""

    text: str
    chain: Network

    def network(self) -> Network:
        return self.chain

    def address(self) -> str:
        return self.text


def from_lwk_address(address) -> BitcoinAddress:
    """Wrap an lwk ``BitcoinAddress``.

    lwk only tells mainnet from the rest; regtest is told apart by its
    segwit prefix, and signet shares testnet's encodings. Segwit addresses
    from uppercase QR codes are lowered.
    """
    text = str(address)
    if text.lower().startswith(_SEGWIT_PREFIXES):
        text = text.lower()
    if address.is_mainnet():
        chain = Network.BITCOIN
    elif text.startswith("bcrt1"):
        chain = Network.REGTEST
    else:
        chain = Network.TESTNET
    return BitcoinAddress(text=text, chain=chain)


def parse_address(text: str) -> BitcoinAddress:
    """Decode a base58check or segwit address.

    Raises:
        InvalidPaymentError: If the string is not a valid bitcoin address.
    """
    s = text.strip()
    if not s:
        raise InvalidPaymentError(text, "empty address")
    payment = read_payment(s, PaymentKind.BITCOIN_ADDRESS)
    return from_lwk_address(payment.bitcoin_address())


def fallback_address(network: Network, version: int, program: bytes) -> str | None:
    """Render a BOLT11 fallback field as an address on ``network``.

    Versions 0-16 are witness versions, 17 is P2PKH and 18 is P2SH.
    Returns None for anything that does not form a valid address.
    """
    if version <= 16:
        if not 2 <= len(program) <= 40:
            return None
        if version == 0 and len(program) not in (20, 32):
            return None
        return encode_segwit_address(_NETWORK_HRPS[network], version, program)

    if version in (17, 18) and len(program) == 20:
        mainnet = network is Network.BITCOIN
        if version == 17:
            prefix = 0x00 if mainnet else 0x6F
        else:
            prefix = 0x05 if mainnet else 0xC4
        return base58.b58encode_check(bytes([prefix]) + program).decode("ascii")
    return None
