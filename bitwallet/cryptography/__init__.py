"""
Elliptic curve cryptography and hash functions
"""
# cryptography/__init__.py
from bitwallet.cryptography.ecc import *
from bitwallet.cryptography.ecdsa import *
from bitwallet.cryptography.hash_functions import *
