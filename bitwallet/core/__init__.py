"""
Contains the core elements that are used within bitwallet

Core:
    -Provides the standard protocol for serializable elements
    -Provides the reference formats and constants
    -Provides custom exceptions for the various wallet elements
    -Provides the logger factory
"""
# core/__init__.py
from bitwallet.core.byte_stream import *
from bitwallet.core.exceptions import *
from bitwallet.core.formats import *
from bitwallet.core.logging import *
from bitwallet.core.serializable import *
