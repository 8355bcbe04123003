"""
The custom exceptions used throughout bitwallet
"""
__all__ = ["StreamError", "ReadError", "WriteError", "DataEncodingError", "InvalidByteLength", "InvalidChecksum",
           "ECCError", "ECCPrivateKeyError", "ECDSAError", "PubKeyError", "WalletError", "MnemonicError",
           "InvalidWordCount", "InvalidWord", "InvalidPhrase", "InvalidEntropyLength", "DerivationPathError",
           "InvalidDerivationPath", "ExtendedKeyError", "InvalidChildNumber", "MaximumChildDepthReached",
           "InvalidVersionBytes", "UnsupportedFormat", "AddressError", "InvalidCharacterLength", "InvalidPrefix",
           "IncompatibleFormats", "PrivateKeyError", "NetworkError", "UnsupportedNetwork", "WitnessProgramError",
           "InvalidProgramLength", "InvalidProgramLengthForVersion", "InvalidVersion", "MismatchedProgramLength",
           "ScriptPubKeyError", "TransactionError", "InvalidSegwitFlag", "InvalidVariableSizeInteger",
           "MissingOutpointScript", "InvalidInputs", "InvalidScriptPubKey", "AmountError"]


# --- STREAMS --- #

class StreamError(Exception):
    """
    For use in reading from and writing to byte streams
    """
    pass


class ReadError(StreamError):
    """
    For use when reading from a byte stream fails
    """
    pass


class WriteError(StreamError):
    """
    For use when a value cannot be written to a byte stream
    """
    pass


# --- ENCODING --- #

class DataEncodingError(Exception):
    """
    For use in encoding/decoding algorithms
    """
    pass


class InvalidByteLength(DataEncodingError):
    """
    Decoded data does not have the expected number of bytes
    """
    pass


class InvalidChecksum(DataEncodingError):
    """
    The checksum of encoded data does not match its payload
    """
    pass


# --- ECC --- #

class ECCError(Exception):
    """
    For use in the EllipticCurve class
    """
    pass


class ECCPrivateKeyError(ECCError):
    """
    For use when a private key is outside [1, n-1]
    """
    pass


class ECDSAError(Exception):
    """
    For use in the ECDSA signature algorithms
    """
    pass


class PubKeyError(Exception):
    """
    For use in the PubKey class
    """
    pass


# --- WALLET --- #

class WalletError(Exception):
    """
    For use in the Wallet classes
    """
    pass


class MnemonicError(WalletError):
    """
    For use in the Mnemonic class
    """
    pass


class InvalidWordCount(MnemonicError):
    """
    The number of words is not one of 12, 15, 18, 21 or 24
    """
    pass


class InvalidWord(MnemonicError):
    """
    A word of the phrase is missing from the wordlist
    """
    pass


class InvalidPhrase(MnemonicError):
    """
    The phrase does not re-encode to itself, i.e. the checksum fails
    """
    pass


class InvalidEntropyLength(MnemonicError):
    """
    Entropy byte length is not BIP39 compliant
    """
    pass


class DerivationPathError(WalletError):
    """
    For use in the ChildIndex and DerivationPath classes
    """
    pass


class InvalidDerivationPath(DerivationPathError):
    """
    A derivation path string or sequence could not be parsed
    """
    pass


class ExtendedKeyError(WalletError):
    """
    For use in the ExtendedKey class
    """
    pass


class InvalidChildNumber(ExtendedKeyError, DerivationPathError):
    """
    The child index is out of range or hardened derivation was requested from a public key
    """
    pass


class MaximumChildDepthReached(ExtendedKeyError):
    """
    Derivation past depth 255
    """
    pass


class InvalidVersionBytes(ExtendedKeyError):
    """
    Extended key version bytes are unknown
    """
    pass


class UnsupportedFormat(ExtendedKeyError):
    """
    The address format has no extended key version bytes
    """
    pass


class AddressError(WalletError):
    """
    For use in the Address class
    """
    pass


class InvalidCharacterLength(AddressError):
    """
    Address text length outside of [14, 74]
    """
    pass


class InvalidPrefix(AddressError):
    """
    Address or WIF prefix unknown for the given network
    """
    pass


class IncompatibleFormats(AddressError):
    """
    The requested address format cannot be created from the given input
    """
    pass


class PrivateKeyError(WalletError):
    """
    For use in the PrivateKey class
    """
    pass


# --- NETWORK --- #

class NetworkError(Exception):
    """
    For use in the network profiles
    """
    pass


class UnsupportedNetwork(NetworkError):
    """
    No network profile matches the given value
    """
    pass


# --- WITNESS PROGRAM --- #

class WitnessProgramError(Exception):
    """
    For use in the WitnessProgram class
    """
    pass


class InvalidProgramLength(WitnessProgramError):
    """
    Witness program outside 2..40 bytes
    """
    pass


class InvalidProgramLengthForVersion(WitnessProgramError):
    """
    Version 0 witness program that is neither 20 nor 32 bytes
    """
    pass


class InvalidVersion(WitnessProgramError):
    """
    Witness version above 16
    """
    pass


class MismatchedProgramLength(WitnessProgramError):
    """
    Declared program length differs from the actual program length
    """
    pass


# --- SCRIPTS --- #

class ScriptPubKeyError(Exception):
    """
    For use in the scriptpubkey functions
    """
    pass


# --- TRANSACTIONS --- #

class TransactionError(Exception):
    """
    For use in the Transaction classes
    """
    pass


class InvalidSegwitFlag(TransactionError):
    """
    Segwit marker not followed by flag 0x01
    """
    pass


class InvalidVariableSizeInteger(TransactionError):
    """
    Non-canonical CompactSize encoding
    """
    pass


class MissingOutpointScript(TransactionError):
    """
    Outpoint has no scriptPubKey when one is needed for serialization
    """
    pass


class InvalidInputs(TransactionError):
    """
    An input is missing data needed for signing
    """
    pass


class InvalidScriptPubKey(TransactionError):
    """
    An outpoint scriptPubKey does not match the outpoint address format
    """
    pass


# --- AMOUNT --- #

class AmountError(Exception):
    """
    For use in the BitcoinAmount class
    """
    pass
