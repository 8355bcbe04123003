"""
Transactions: the wire format, transaction ids and signing
"""
# tx/__init__.py
from bitwallet.tx.tx import *
from bitwallet.tx.signer import *
