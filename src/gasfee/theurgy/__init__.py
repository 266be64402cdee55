"""
Theurgy - Command implementations for gasfee.

Each module groups related top-level CLI commands:
- estimate: Fee and gas estimates, margin-adjusted fee set
- send:     Simulate-then-send scenarios for the mint call
- query:    Balance, nonce and transaction lookups
- guard:    Balance threshold check before sending
"""
