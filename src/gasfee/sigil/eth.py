"""
ECDSA / secp256k1 account derivation for gasfee.

The signing account comes either from a raw private key (PRIVATE_KEY)
or from a BIP-39 seed phrase (MNEMONIC). It is derived once per run and
handed to the clients that need it.

Dependencies: eth-account
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import ValidationError

if TYPE_CHECKING:
    from ..config import Settings


# First account of the standard Ethereum derivation path
DEFAULT_HD_PATH = "m/44'/60'/0'/0/0"


class AccountConfigError(ValueError):
    """Neither a private key nor a mnemonic is available."""


def normalize_private_key(private_key: str) -> str:
    """Return the key with a ``0x`` prefix (PRIVATE_KEY is stored without one)."""
    private_key = private_key.strip()
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return private_key


def resolve_account(
    private_key: Optional[str] = None,
    mnemonic: Optional[str] = None,
    hd_path: str = DEFAULT_HD_PATH,
) -> LocalAccount:
    """
    Derive a signing account.

    Args:
        private_key: hex private key, ``0x`` prefix optional. Wins when set.
        mnemonic: seed phrase used when no private key is given
        hd_path: derivation path for the mnemonic

    Returns:
        LocalAccount instance for signing transactions

    Raises:
        AccountConfigError: If neither source is provided, or the one
            given does not decode to a key
    """
    if private_key:
        try:
            return Account.from_key(normalize_private_key(private_key))
        except ValueError as exc:
            raise AccountConfigError(f"Invalid PRIVATE_KEY: {exc}") from exc

    if mnemonic:
        Account.enable_unaudited_hdwallet_features()
        try:
            return Account.from_mnemonic(mnemonic.strip(), account_path=hd_path)
        except (ValueError, ValidationError) as exc:
            raise AccountConfigError(f"Invalid MNEMONIC: {exc}") from exc

    raise AccountConfigError(
        "No signing account configured. Set PRIVATE_KEY or MNEMONIC in .env"
    )


def account_from_settings(settings: "Settings") -> LocalAccount:
    """Derive the run's account from PRIVATE_KEY, falling back to MNEMONIC."""
    return resolve_account(
        private_key=settings.private_key or None,
        mnemonic=settings.mnemonic or None,
    )
