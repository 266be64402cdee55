__all__ = [
    # Configuration
    "Settings",
    "load_settings",
    # Accounts
    "AccountConfigError",
    "resolve_account",
    "account_from_settings",
    # Networks
    "Chain",
    "CHAINS",
    "UnknownChainError",
    "select_chain",
    "list_chain_names",
    # RPC
    "JsonRpc",
    "PublicClient",
    "WalletClient",
    "RpcError",
    "TransactionNotFoundError",
    "FeesNotSupportedError",
    "describe_error",
    # Parameters
    "DynamicFee",
    "LegacyFee",
    "TxOverrides",
    "FeeModeConflictError",
    "TipAboveFeeCapError",
    "build_params",
    # Fees
    "FeeEstimate",
    "MarginFees",
    "calculate_margin_fees",
    "parse_gwei",
    "parse_ether",
    # Scenarios
    "MintScenarios",
    "TxResult",
    "BalanceCheck",
    # Sessions
    "Session",
    "create_clients",
    "open_session",
]

from .config import Settings, load_settings
from .sigil.eth import AccountConfigError, account_from_settings, resolve_account
from .pneuma.chains import CHAINS, Chain, UnknownChainError, list_chain_names, select_chain
from .pneuma.rpc import (
    FeesNotSupportedError,
    JsonRpc,
    PublicClient,
    RpcError,
    TransactionNotFoundError,
    describe_error,
)
from .pneuma.tx import (
    DynamicFee,
    FeeModeConflictError,
    LegacyFee,
    TipAboveFeeCapError,
    TxOverrides,
    WalletClient,
    build_params,
)
from .pneuma.fees import FeeEstimate, MarginFees, calculate_margin_fees, parse_ether, parse_gwei
from .pneuma.scenarios import BalanceCheck, MintScenarios, TxResult
from .session import Session, create_clients, open_session
