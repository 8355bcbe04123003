"""
All classes and methods which have to do with a Bitcoin wallet
"""
# wallet/__init__.py
from bitwallet.wallet.address import *
from bitwallet.wallet.derivation import *
from bitwallet.wallet.xkeys import *
from bitwallet.wallet.mnemonic import *
from bitwallet.wallet.wallet import *
