"""
Standard Bitcoin scripts, witness programs and signature hash types
"""
# script/__init__.py
from bitwallet.script.scriptpubkey import *
from bitwallet.script.sighash import *
from bitwallet.script.witness_program import *
