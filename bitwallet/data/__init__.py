"""
All methods for encoding and representing data in bitwallet
"""

# data/__init__.py
from bitwallet.data.amount import *
from bitwallet.data.compact_size import *
from bitwallet.data.ecc_keys import *
from bitwallet.data.encoding import *
from bitwallet.data.network import *
from bitwallet.data.wordlist import *
