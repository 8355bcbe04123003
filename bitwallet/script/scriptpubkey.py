"""
Builders for the standard scripts: scriptPubKeys, redeem scripts and BIP143 script codes
"""
from bitwallet.core import AddressFormat, OPCODES, ScriptPubKeyError, ADDRESS
from bitwallet.cryptography import hash160, sha256
from bitwallet.script.witness_program import WitnessProgram

__all__ = ["encode_pushdata", "p2pkh_script", "p2sh_script", "p2wpkh_script", "p2wsh_script",
           "p2wpkh_redeem_script", "p2pkh_script_code", "create_script_pub_key"]


def encode_pushdata(data: bytes) -> bytes:
    """
    We return the correct OP_PUSHBYTES/OP_PUSHDATA for given data
    """
    data_len = len(data)
    # OP_0 pushes the empty array
    if data_len == 0:
        return bytes([OPCODES.OP_0])
    # OP_PUSHBYTES
    if data_len <= 0x4b:
        return data_len.to_bytes(1, "little") + data
    # OP_PUSHDATA1
    elif data_len <= 0xff:
        return bytes([OPCODES.OP_PUSHDATA1]) + data_len.to_bytes(1, "little") + data
    # OP_PUSHDATA2
    elif data_len <= 0xffff:
        return bytes([OPCODES.OP_PUSHDATA2]) + data_len.to_bytes(2, "little") + data
    # OP_PUSHDATA4
    elif data_len <= 0xffffffff:
        return bytes([OPCODES.OP_PUSHDATA4]) + data_len.to_bytes(4, "little") + data
    else:
        raise ScriptPubKeyError("Item of incorrect length to be pushed on stack.")


def _check_hash(data: bytes, length: int = ADDRESS.HASH_LENGTH):
    if len(data) != length:
        raise ScriptPubKeyError(f"Expected {length}-byte hash, found {len(data)} bytes")


def p2pkh_script(pubkey_hash: bytes) -> bytes:
    """OP_DUP OP_HASH160 OP_PUSHBYTES_20 <pubkey_hash> OP_EQUALVERIFY OP_CHECKSIG"""
    _check_hash(pubkey_hash)
    return bytes([OPCODES.OP_DUP, OPCODES.OP_HASH160]) + encode_pushdata(pubkey_hash) + bytes(
        [OPCODES.OP_EQUALVERIFY, OPCODES.OP_CHECKSIG])


def p2sh_script(script_hash: bytes) -> bytes:
    """OP_HASH160 OP_PUSHBYTES_20 <script_hash> OP_EQUAL"""
    _check_hash(script_hash)
    return bytes([OPCODES.OP_HASH160]) + encode_pushdata(script_hash) + bytes([OPCODES.OP_EQUAL])


def p2wpkh_script(pubkey_hash: bytes) -> bytes:
    """OP_0 OP_PUSHBYTES_20 <pubkey_hash>"""
    _check_hash(pubkey_hash)
    return WitnessProgram(0, pubkey_hash).to_script_pub_key()


def p2wsh_script(witness_script: bytes) -> bytes:
    """OP_0 OP_PUSHBYTES_32 <SHA256(witness_script)>"""
    return WitnessProgram(0, sha256(witness_script)).to_script_pub_key()


def p2wpkh_redeem_script(compressed_pubkey: bytes) -> bytes:
    """
    The P2SH-P2WPKH redeem script: 0x00 0x14 || HASH160(compressed pubkey)
    """
    return bytes([OPCODES.OP_0]) + encode_pushdata(hash160(compressed_pubkey))


def p2pkh_script_code(pubkey_hash: bytes) -> bytes:
    """
    The BIP143 scriptCode for P2WPKH spends: the length-prefixed P2PKH script of the key hash
    """
    script = p2pkh_script(pubkey_hash)
    return len(script).to_bytes(1, "little") + script


def create_script_pub_key(address) -> bytes:
    """
    Return the scriptPubKey locking funds to the given Address
    """
    payload = address.payload()
    match address.address_format:
        case AddressFormat.P2PKH:
            return p2pkh_script(payload)
        case AddressFormat.P2SH_P2WPKH:
            return p2sh_script(payload)
        case AddressFormat.BECH32 | AddressFormat.P2WSH:
            return WitnessProgram(address.witness_version(), payload).to_script_pub_key()
        case _:
            raise ScriptPubKeyError(f"Unknown address format: {address.format}")
