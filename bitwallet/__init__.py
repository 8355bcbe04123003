"""
bitwallet: Bitcoin wallet primitives

Mnemonic seeds, hierarchical deterministic keys, addresses and transaction signing.
"""
__version__ = "0.1.0"
