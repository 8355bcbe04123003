"""
The classes for bitwallet transactions
"""
import copy
import json
import secrets
from io import BytesIO
from typing import Callable

from bitwallet.core import (Serializable, SERIALIZED, get_stream, read_little_int, read_stream, TX, OPCODES,
                            AddressFormat, InvalidSegwitFlag, InvalidInputs, InvalidScriptPubKey,
                            MissingOutpointScript, TransactionError, get_logger)
from bitwallet.cryptography import hash256
from bitwallet.data import (BitcoinAmount, read_compact_size, write_compact_size, read_witness_vector, write_vector,
                            read_vector, PrivateKey)
from bitwallet.script import SigHash
from bitwallet.wallet import Address

__all__ = ["Outpoint", "TxInput", "TxOutput", "Transaction", "TransactionId"]

logger = get_logger(__name__)

P2WSH_SCRIPT_PUB_KEY_LENGTH = 34
DER_SEQUENCE = 0x30
MIN_SIGNATURE_PUSH = 9  # 8-byte DER minimum plus the sighash byte
MAX_SIGNATURE_PUSH = 73


def _to_amount(amount: BitcoinAmount | int | None) -> BitcoinAmount | None:
    if amount is None or isinstance(amount, BitcoinAmount):
        return amount
    return BitcoinAmount(amount)


def _sighash_from_byte(value: int) -> SigHash:
    """Unknown sighash bytes read as ALL"""
    try:
        return SigHash(value)
    except ValueError:
        return SigHash.ALL


def _signature_push(script_sig: bytes) -> bytes | None:
    """
    The first push of the scriptSig if it has the shape of a DER signature followed by a sighash byte, else None
    """
    if not script_sig:
        return None
    push_length = script_sig[0]
    if not MIN_SIGNATURE_PUSH <= push_length <= MAX_SIGNATURE_PUSH or push_length >= len(script_sig):
        return None
    signature = script_sig[1:1 + push_length]
    # 0x30 || total length || r || s || sighash
    if signature[0] != DER_SEQUENCE or signature[1] != push_length - 3:
        return None
    return signature


class Outpoint:
    """
    A reference to a previous output, along with what is known about it for signing:
    its amount, scriptPubKey, redeem script and address.

    If only the address is given, the scriptPubKey is derived from it.
    """
    __slots__ = ("reverse_txid", "index", "amount", "script_pub_key", "redeem_script", "address")

    def __init__(self, reverse_txid: bytes, index: int, amount: BitcoinAmount | int | None = None,
                 script_pub_key: bytes | None = None, redeem_script: bytes | None = None,
                 address: Address | None = None):
        if len(reverse_txid) != TX.TXID:
            raise TransactionError(f"Outpoint txid must be {TX.TXID} bytes, found {len(reverse_txid)}")
        if not 0 <= index <= 0xffffffff:
            raise TransactionError(f"Outpoint index {index} out of u32 range")

        if address is not None:
            if script_pub_key is None:
                script_pub_key = address.to_script_pub_key()
            self._validate(address.address_format, script_pub_key, redeem_script)

        self.reverse_txid = reverse_txid
        self.index = index
        self.amount = _to_amount(amount)
        self.script_pub_key = script_pub_key
        self.redeem_script = redeem_script
        self.address = address

    @staticmethod
    def _validate(address_format: AddressFormat, script_pub_key: bytes, redeem_script: bytes | None):
        """
        The scriptPubKey must have the shape of the address format and the redeem script must be present
        exactly where the format needs one
        """
        match address_format:
            case AddressFormat.P2PKH:
                if redeem_script is not None:
                    raise InvalidInputs("P2PKH outpoint cannot have a redeem script")
                if not (script_pub_key[:2] == bytes([OPCODES.OP_DUP, OPCODES.OP_HASH160])
                        and script_pub_key[-1:] == bytes([OPCODES.OP_CHECKSIG])):
                    raise InvalidScriptPubKey(f"Invalid P2PKH scriptPubKey: {script_pub_key.hex()}")
            case AddressFormat.P2SH_P2WPKH:
                if not (script_pub_key[:1] == bytes([OPCODES.OP_HASH160])
                        and script_pub_key[-1:] == bytes([OPCODES.OP_EQUAL])):
                    raise InvalidScriptPubKey(f"Invalid P2SH_P2WPKH scriptPubKey: {script_pub_key.hex()}")
            case AddressFormat.BECH32:
                if redeem_script is not None:
                    raise InvalidInputs("Bech32 outpoint cannot have a redeem script")
            case AddressFormat.P2WSH:
                if redeem_script is None:
                    raise InvalidInputs("P2WSH outpoint requires a redeem script")
                if not (len(script_pub_key) == P2WSH_SCRIPT_PUB_KEY_LENGTH
                        and script_pub_key[:2] == bytes([OPCODES.OP_0, 0x20])):
                    raise InvalidScriptPubKey(f"Invalid P2WSH scriptPubKey: {script_pub_key.hex()}")

    def to_bytes(self) -> bytes:
        """reverse_txid || index"""
        return self.reverse_txid + self.index.to_bytes(TX.VOUT, "little")

    def to_dict(self) -> dict:
        return {
            "txid": self.reverse_txid[::-1].hex(),
            "index": self.index,
            "amount": self.amount.satoshi if self.amount is not None else None,
            "script_pub_key": self.script_pub_key.hex() if self.script_pub_key is not None else None,
            "redeem_script": self.redeem_script.hex() if self.redeem_script is not None else None,
            "address": str(self.address) if self.address is not None else None
        }

    def to_json(self):
        return json.dumps(self.to_dict(), indent=2)


class TxInput(Serializable):
    """
    =============================================================================
    |   name            |   data type   |   format              |   byte size   |
    =============================================================================
    |   txid            |   bytes       |   natural byte order  |   32          |
    |   vout            |   int         |   little-endian       |   4           |
    |   scriptsig_size  |               |   compactSize         |   var         |
    |   scriptsig       |   bytes       |   script bytes        |   var         |
    |   sequence        |   int         |   little-endian       |   4           |
    =============================================================================
    The witness stack is serialized separately, after all outputs.
    """
    __slots__ = ("outpoint", "script_sig", "sequence", "sighash_code", "witnesses", "is_signed",
                 "additional_witness", "witness_script_data")

    def __init__(self, outpoint: Outpoint, script_sig: bytes = b'', sequence: int = TX.DEFAULT_SEQUENCE,
                 sighash_code: SigHash = SigHash.ALL, witnesses: list[bytes] | None = None,
                 is_signed: bool | None = None, additional_witness: tuple[bytes, bool] | None = None,
                 witness_script_data: bytes | None = None):
        """
        additional_witness: (companion signature, is_first) for P2WSH multisig, where is_first places the
        companion signature before this signer's own
        """
        self.outpoint = outpoint
        self.script_sig = script_sig
        self.sequence = sequence
        self.sighash_code = sighash_code
        self.witnesses = witnesses or []
        self.is_signed = bool(script_sig) if is_signed is None else is_signed
        self.additional_witness = additional_witness
        self.witness_script_data = witness_script_data

    @classmethod
    def from_bytes(cls, byte_stream: SERIALIZED):
        stream = get_stream(byte_stream)

        reverse_txid = read_stream(stream, TX.TXID, "txid")
        index = read_little_int(stream, TX.VOUT, "vout")
        script_sig_size = read_compact_size(stream)
        script_sig = read_stream(stream, script_sig_size, "scriptsig")
        sequence = read_little_int(stream, TX.SEQUENCE, "sequence")

        # A signed scriptSig starts with a signature push, whose last byte is the sighash.
        # Anything else (an unsigned placeholder or a coinbase script) is kept as-is but left unsigned.
        signature = _signature_push(script_sig)
        sighash_code = _sighash_from_byte(signature[-1]) if signature else SigHash.ALL

        return cls(Outpoint(reverse_txid, index), script_sig, sequence, sighash_code, is_signed=signature is not None)

    def to_bytes(self, raw: bool = False) -> bytes:
        """
        txid || vout || scriptsig_size || scriptsig || sequence

        An input without a scriptSig writes a zero-length script if raw, or if its outpoint is native segwit or
        has no address. Otherwise it writes the outpoint's scriptPubKey in place of the scriptSig.
        """
        if self.script_sig:
            script = self.script_sig
        elif raw or self.outpoint.address is None or self.outpoint.address.address_format.is_native_segwit:
            script = b''
        elif self.outpoint.script_pub_key is None:
            raise MissingOutpointScript(f"Outpoint {self.outpoint.reverse_txid[::-1].hex()} has no scriptPubKey")
        else:
            script = self.outpoint.script_pub_key

        parts = [
            self.outpoint.to_bytes(),
            write_compact_size(len(script)),
            script,
            self.sequence.to_bytes(TX.SEQUENCE, "little")
        ]
        return b''.join(parts)

    def witness_bytes(self) -> bytes:
        """Item count followed by length-prefixed items. An empty stack is 0x00"""
        return write_vector(self.witnesses)

    def to_dict(self) -> dict:
        return {
            "outpoint": self.outpoint.to_dict(),
            "script_sig": self.script_sig.hex(),
            "sequence": self.sequence,
            "sighash_code": self.sighash_code.name,
            "witnesses": [w.hex() for w in self.witnesses],
            "is_signed": self.is_signed
        }


class TxOutput(Serializable):
    """
    TxOutput
    -----------------------------------------------------------------
    |   Field               |   Byte Size   |   Format              |
    -----------------------------------------------------------------
    |   Amount              |   8           |   little-endian       |
    |   scriptpubkey_size   |   var         |   CompactSize         |
    |   scriptpubkey        |   var         |   Script              |
    -----------------------------------------------------------------
    """
    __slots__ = ("amount", "script_pub_key")

    def __init__(self, amount: BitcoinAmount | int, script_pub_key: bytes):
        self.amount = _to_amount(amount)
        self.script_pub_key = script_pub_key

    @classmethod
    def from_address(cls, address: Address, amount: BitcoinAmount | int):
        return cls(amount, address.to_script_pub_key())

    @classmethod
    def from_bytes(cls, byte_stream: SERIALIZED):
        stream = get_stream(byte_stream)

        amount = int.from_bytes(read_stream(stream, TX.AMOUNT, "amount"), "little", signed=True)
        script_pub_key_size = read_compact_size(stream)
        script_pub_key = read_stream(stream, script_pub_key_size, "scriptpubkey")

        return cls(amount, script_pub_key)

    def to_bytes(self) -> bytes:
        """
        amount || scriptpubkey_size || scriptpubkey
        """
        return (self.amount.satoshi.to_bytes(TX.AMOUNT, "little", signed=True)
                + write_compact_size(len(self.script_pub_key)) + self.script_pub_key)

    def to_dict(self) -> dict:
        return {
            "amount": self.amount.satoshi,
            "script_pub_key": self.script_pub_key.hex()
        }


class TransactionId:
    """
    txid and wtxid, both in display (reversed) byte order
    """
    __slots__ = ("txid", "wtxid")

    def __init__(self, txid: bytes, wtxid: bytes):
        self.txid = txid
        self.wtxid = wtxid

    def __eq__(self, other):
        if not isinstance(other, TransactionId):
            return False
        return self.txid == other.txid and self.wtxid == other.wtxid

    def __hash__(self):
        return hash((self.txid, self.wtxid))

    def __str__(self):
        return self.txid.hex()

    def __repr__(self):
        return f"TransactionId(txid={self.txid.hex()}, wtxid={self.wtxid.hex()})"


class Transaction(Serializable):
    """
    Transaction
    -------------------------------------------------------------
    |   Field           |   Byte Size   |   Format              |
    -------------------------------------------------------------
    |   Version         |   4           |   little-endian       |
    |   Marker*         |   1           |   0x00                |
    |   Flag*           |   1           |   0x01                |
    |   input_count     |   var         |   CompactSize         |
    |   inputs          |   var         |   TxInput             |
    |   output_count    |   var         |   CompactSize         |
    |   outputs         |   var         |   TxOutput            |
    |   witness*        |   var         |   stack per input     |
    |   locktime        |   4           |   little-endian       |
    -------------------------------------------------------------
    * indicates optional segwit specific fields
    """
    __slots__ = ("version", "inputs", "outputs", "lock_time", "segwit_flag")

    def __init__(self, inputs: list[TxInput] | None = None, outputs: list[TxOutput] | None = None,
                 lock_time: int = 0, version: int = TX.DEFAULT_VERSION, segwit_flag: bool = False):
        self.inputs = inputs or []
        self.outputs = outputs or []
        self.lock_time = lock_time
        self.version = version
        self.segwit_flag = segwit_flag

    @classmethod
    def from_bytes(cls, byte_stream: SERIALIZED):
        stream = get_stream(byte_stream)

        version = read_little_int(stream, TX.VERSION, "version")

        # A zero input count is the segwit marker
        segwit_flag = False
        input_count = read_compact_size(stream)
        if input_count == 0:
            flag = read_stream(stream, 1, "segwit flag")
            if flag != TX.FLAG:
                raise InvalidSegwitFlag(f"Expected segwit flag 0x01, found {flag.hex()}")
            segwit_flag = True
            input_count = read_compact_size(stream)

        inputs = [TxInput.from_bytes(stream) for _ in range(input_count)]
        outputs = read_vector(stream, TxOutput.from_bytes)

        if segwit_flag:
            for txin in inputs:
                _, items = read_witness_vector(stream)
                txin.witnesses = items
                if items and items[0]:
                    txin.sighash_code = _sighash_from_byte(items[0][-1])
                    txin.is_signed = True

        lock_time = read_little_int(stream, TX.LOCKTIME, "locktime")

        # A complete serialization must be consumed exactly
        if not isinstance(byte_stream, BytesIO) and stream.read(1):
            raise TransactionError("Unexpected data after transaction locktime")

        logger.debug(f"Parsed transaction with {len(inputs)} inputs and {len(outputs)} outputs")
        return cls(inputs, outputs, lock_time, version, segwit_flag)

    def _serialize(self, raw_scripts: bool, include_witness: bool) -> bytes:
        parts = [self.version.to_bytes(TX.VERSION, "little")]
        if include_witness:
            parts.append(TX.MARKER + TX.FLAG)

        parts.append(write_compact_size(len(self.inputs)))
        parts.extend(txin.to_bytes(raw_scripts) for txin in self.inputs)
        parts.append(write_compact_size(len(self.outputs)))
        parts.extend(txout.to_bytes() for txout in self.outputs)

        if include_witness:
            parts.extend(txin.witness_bytes() for txin in self.inputs)

        parts.append(self.lock_time.to_bytes(TX.LOCKTIME, "little"))
        return b''.join(parts)

    @property
    def has_witness(self) -> bool:
        """True if the segwit flag is set or any input carries a witness stack"""
        return self.segwit_flag or any(txin.witnesses for txin in self.inputs)

    def serialize(self, raw: bool = False) -> bytes:
        """
        The wire format. Unsigned legacy inputs carry their outpoint scriptPubKey in place of the scriptSig.
        If raw, unsigned inputs write zero-length scripts and the marker, flag and witness section are omitted.
        """
        return self._serialize(raw_scripts=raw, include_witness=self.has_witness and not raw)

    def to_bytes(self) -> bytes:
        return self.serialize()

    # --- IDS --- #

    @property
    def txid(self) -> bytes:
        """reverse(HASH256) of the serialization without marker, flag or witnesses"""
        return hash256(self._serialize(raw_scripts=True, include_witness=False))[::-1]

    @property
    def wtxid(self) -> bytes:
        """reverse(HASH256) of the full serialization"""
        return hash256(self._serialize(raw_scripts=True, include_witness=self.has_witness))[::-1]

    def to_transaction_id(self) -> TransactionId:
        return TransactionId(self.txid, self.wtxid)

    # --- SIGNING --- #

    def clone(self) -> "Transaction":
        return copy.deepcopy(self)

    def sign(self, private_key: PrivateKey, rng: Callable[[int], int] = secrets.randbelow) -> "Transaction":
        """
        Return a copy of this transaction with every unsigned input spendable by the given key signed
        """
        from bitwallet.tx.signer import SignatureEngine
        return SignatureEngine().sign(self, private_key, rng)

    def to_dict(self) -> dict:
        return {
            "txid": self.txid.hex(),
            "wtxid": self.wtxid.hex(),
            "version": self.version,
            "segwit_flag": self.segwit_flag,
            "inputs": [txin.to_dict() for txin in self.inputs],
            "outputs": [txout.to_dict() for txout in self.outputs],
            "lock_time": self.lock_time
        }
