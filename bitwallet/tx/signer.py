"""
The SignatureEngine class, used to create signatures for transactions
"""
import secrets
from typing import Callable

from bitwallet.core import TX, AddressFormat, InvalidInputs, get_logger
from bitwallet.cryptography import hash256, hash160
from bitwallet.data import (PrivateKey, PubKey, write_compact_size, encode_der_signature, decode_der_signature)
from bitwallet.script import SigHash, encode_pushdata, p2wpkh_redeem_script, p2pkh_script_code
from bitwallet.tx.tx import Transaction, TxInput
from bitwallet.wallet import Address

__all__ = ["SignatureEngine"]

logger = get_logger(__name__)

ZERO_HASH = b'\x00' * 32
SIGHASH_SINGLE_BUG = (1).to_bytes(32, "little")
BLANK_OUTPUT = b'\xff' * TX.AMOUNT + b'\x00'  # amount -1 with an empty script


class SignatureEngine:
    """Signature hashes, signatures and the scriptSig/witness assembly for each address format"""

    # --- SIGHASH ALGORITHMS --- #

    def get_legacy_sighash(self, tx: Transaction, input_index: int, script_pub_key: bytes,
                           sighash: SigHash = SigHash.ALL) -> bytes:
        """
        Computes the legacy message hash for signing:
            1. Put the scriptPubKey of the spent output in the scriptSig of the input being signed
            2. Blank all other scriptSigs. For NONE and SINGLE also zero the other sequences
            3. NONE drops all outputs. SINGLE keeps the outputs up to input_index, blanking all but the last
            4. ANYONECANPAY keeps only the input being signed
            5. Append the sighash as a 4-byte little-endian integer and HASH256
        SINGLE with no matching output returns the integer 1 as a 32-byte little-endian value.
        """
        base_type = sighash.base_type

        if base_type == SigHash.SINGLE and input_index >= len(tx.outputs):
            return SIGHASH_SINGLE_BUG

        # Inputs
        inputs = []
        for i, txin in enumerate(tx.inputs):
            if i == input_index:
                script, sequence = script_pub_key, txin.sequence
            else:
                script = b''
                sequence = txin.sequence if base_type == SigHash.ALL else 0
            inputs.append(txin.outpoint.to_bytes() + write_compact_size(len(script)) + script
                          + sequence.to_bytes(TX.SEQUENCE, "little"))
        if sighash.anyone_can_pay:
            inputs = [inputs[input_index]]

        # Outputs
        match base_type:
            case SigHash.NONE:
                outputs = []
            case SigHash.SINGLE:
                outputs = [BLANK_OUTPUT] * input_index + [tx.outputs[input_index].to_bytes()]
            case _:
                outputs = [txout.to_bytes() for txout in tx.outputs]

        preimage = b''.join([
            tx.version.to_bytes(TX.VERSION, "little"),
            write_compact_size(len(inputs)),
            *inputs,
            write_compact_size(len(outputs)),
            *outputs,
            tx.lock_time.to_bytes(TX.LOCKTIME, "little"),
            sighash.for_hashing()
        ])
        return hash256(preimage)

    def get_segwit_sighash(self, tx: Transaction, input_index: int, script_code: bytes, amount: int,
                           sighash: SigHash = SigHash.ALL) -> bytes:
        """
        We return the BIP143 sighash for a segwit input:
            version || hashPrevouts || hashSequence || outpoint || scriptCode || amount || sequence
            || hashOutputs || locktime || sighash
        """
        base_type = sighash.base_type
        txin = tx.inputs[input_index]

        # hashPrevouts
        if sighash.anyone_can_pay:
            hash_prevouts = ZERO_HASH
        else:
            hash_prevouts = hash256(b''.join(i.outpoint.to_bytes() for i in tx.inputs))

        # hashSequence
        if sighash.anyone_can_pay or base_type in (SigHash.SINGLE, SigHash.NONE):
            hash_sequence = ZERO_HASH
        else:
            hash_sequence = hash256(b''.join(i.sequence.to_bytes(TX.SEQUENCE, "little") for i in tx.inputs))

        # hashOutputs
        if base_type not in (SigHash.SINGLE, SigHash.NONE):
            hash_outputs = hash256(b''.join(o.to_bytes() for o in tx.outputs))
        elif base_type == SigHash.SINGLE and input_index < len(tx.outputs):
            hash_outputs = hash256(tx.outputs[input_index].to_bytes())
        else:
            hash_outputs = ZERO_HASH

        preimage = b''.join([
            tx.version.to_bytes(TX.VERSION, "little"),
            hash_prevouts,
            hash_sequence,
            txin.outpoint.to_bytes(),
            script_code,
            amount.to_bytes(TX.AMOUNT, "little", signed=True),
            txin.sequence.to_bytes(TX.SEQUENCE, "little"),
            hash_outputs,
            tx.lock_time.to_bytes(TX.LOCKTIME, "little"),
            sighash.for_hashing()
        ])
        return hash256(preimage)

    def get_input_sighash(self, tx: Transaction, input_index: int, public_key: PubKey) -> bytes:
        """
        The digest to sign for the given input, chosen by the format of its outpoint address
        """
        txin = tx.inputs[input_index]
        outpoint = txin.outpoint
        address_format = outpoint.address.address_format

        if address_format == AddressFormat.P2PKH:
            return self.get_legacy_sighash(tx, input_index, outpoint.script_pub_key, txin.sighash_code)

        if outpoint.amount is None:
            raise InvalidInputs(f"Input {input_index}: segwit input requires the outpoint amount")

        if address_format == AddressFormat.P2WSH:
            if outpoint.redeem_script is None:
                raise InvalidInputs(f"Input {input_index}: P2WSH input requires a witness script")
            script_code = write_compact_size(len(outpoint.redeem_script)) + outpoint.redeem_script
        else:
            script_code = p2pkh_script_code(hash160(public_key.compressed()))

        return self.get_segwit_sighash(tx, input_index, script_code, outpoint.amount.satoshi, txin.sighash_code)

    # --- SIGNATURES --- #

    def sign_input(self, tx: Transaction, input_index: int, private_key: PrivateKey,
                   rng: Callable[[int], int] = secrets.randbelow) -> bytes:
        """
        DER signature with the sighash byte appended, for the given input. Used directly to produce the companion
        signature of a P2WSH multisig input.
        """
        txin = tx.inputs[input_index]
        if txin.outpoint.address is None:
            raise InvalidInputs(f"Input {input_index}: outpoint has no address")

        digest = self.get_input_sighash(tx, input_index, private_key.public_key())
        r, s = private_key.sign(digest, rng)
        return encode_der_signature(r, s) + txin.sighash_code.to_byte()

    def verify_ecdsa_sig(self, signature: bytes, digest: bytes, public_key: PubKey) -> bool:
        """
        Verify a DER signature with trailing sighash byte against the given digest
        """
        r, s = decode_der_signature(signature[:-1])
        return public_key.verify((r, s), digest)

    def _owns_input(self, txin: TxInput, private_key: PrivateKey) -> bool:
        address = txin.outpoint.address
        if address.address_format == AddressFormat.P2WSH:
            if txin.outpoint.redeem_script is None:
                return False
            expected = Address.p2wsh(txin.outpoint.redeem_script, address.network)
        else:
            expected = Address.from_public_key(private_key.public_key(), address.address_format, address.network)
        return expected.address.lower() == address.address.lower()

    def sign(self, tx: Transaction, private_key: PrivateKey,
             rng: Callable[[int], int] = secrets.randbelow) -> Transaction:
        """
        Return a signed copy of the transaction. Inputs that are already signed, have no address or are not
        spendable by the given key are left untouched.
        """
        signed_tx = tx.clone()
        public_key = private_key.public_key()

        for vin, txin in enumerate(signed_tx.inputs):
            if txin.is_signed or txin.outpoint.address is None:
                continue
            if not self._owns_input(txin, private_key):
                logger.debug(f"Input {vin} not spendable by the given key, skipping")
                continue

            address_format = txin.outpoint.address.address_format
            signature = self.sign_input(signed_tx, vin, private_key, rng)

            match address_format:
                case AddressFormat.P2PKH:
                    txin.script_sig = encode_pushdata(signature) + encode_pushdata(public_key.to_bytes())
                case AddressFormat.P2SH_P2WPKH:
                    redeem_script = txin.outpoint.redeem_script or p2wpkh_redeem_script(public_key.compressed())
                    txin.script_sig = encode_pushdata(redeem_script)
                    txin.witnesses = [signature, public_key.compressed()]
                case AddressFormat.BECH32:
                    txin.script_sig = b''
                    txin.witnesses = [signature, public_key.compressed()]
                case AddressFormat.P2WSH:
                    if txin.additional_witness is None:
                        raise InvalidInputs(f"Input {vin}: P2WSH input requires a companion signature")
                    companion, companion_first = txin.additional_witness
                    witnesses = [companion, signature] if companion_first else [signature, companion]
                    if txin.witness_script_data is not None:
                        witnesses.append(txin.witness_script_data)
                    witnesses.append(txin.outpoint.redeem_script)
                    txin.script_sig = b''
                    txin.witnesses = witnesses

            if txin.witnesses:
                signed_tx.segwit_flag = True
            txin.is_signed = True
            logger.debug(f"Signed input {vin} ({address_format})")

        return signed_tx
