"""
Pneuma - On-chain interaction layer for gasfee.

Provides the async JSON-RPC client pair, the example contract surface,
the fee margin policy and the transaction scenarios built on them.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
