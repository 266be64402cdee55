"""
Sigil - signing identity for gasfee (private key or mnemonic).
"""
