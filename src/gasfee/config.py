"""
Environment configuration for gasfee.

Values are read from the process environment after loading a ``.env``
file (``./.env`` by default). Missing keys become empty strings.

Keys:
  CHAIN        - network identifier (homestead, goerli, sepolia, maticmum)
  PRIVATE_KEY  - hex private key, ``0x`` prefix optional
  MNEMONIC     - seed phrase, used when PRIVATE_KEY is empty
  PROVIDER     - RPC endpoint URL; the chain default is used when empty
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from dotenv import load_dotenv

if TYPE_CHECKING:
    from .pneuma.chains import Chain


DEFAULT_ENV = Path(".env")


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment-sourced configuration."""

    chain: str = ""
    private_key: str = ""
    mnemonic: str = ""
    provider: str = ""

    def endpoint(self, chain: "Chain") -> str:
        """RPC URL to use for *chain*: PROVIDER if set, else the chain default."""
        return self.provider or chain.rpc_url


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Load settings from a .env file and the environment.

    Args:
        env_path: Path to .env file (default: ./.env). Values already in
                  the environment take precedence over the file.

    Returns:
        Settings instance
    """
    env_path = env_path or DEFAULT_ENV
    if env_path.exists():
        load_dotenv(env_path)

    return Settings(
        chain=os.environ.get("CHAIN", "").strip(),
        private_key=os.environ.get("PRIVATE_KEY", "").strip(),
        mnemonic=os.environ.get("MNEMONIC", "").strip(),
        provider=os.environ.get("PROVIDER", "").strip(),
    )
