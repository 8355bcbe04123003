"""
The Mnemonic class - BIP39 entropy, its word phrase and the derived seed
"""
import secrets
from typing import Callable

from bitwallet.core import (WALLET, AddressFormat, InvalidWordCount, InvalidWord, InvalidPhrase, InvalidEntropyLength,
                            get_logger)
from bitwallet.cryptography import sha256, pbkdf2
from bitwallet.data import load_wordlist, NetworkProfile, MAINNET
from bitwallet.wallet.xkeys import ExtendedKey

__all__ = ["Mnemonic"]

logger = get_logger(__name__)

# --- CONSTANTS --- #
ALLOWED_ENTROPY_BYTELEN = tuple(WALLET.MNEMONIC.keys())
WORD_COUNTS = {v[WALLET.WORD_KEY]: bytelen for bytelen, v in WALLET.MNEMONIC.items()}
CHECKSUM_KEY = WALLET.CHECKSUM_KEY
WORD_BITS = WALLET.WORD_BITS
IDEOGRAPHIC_SPACE = "\u3000"


class Mnemonic:
    """
    BIP39 mnemonic. Entropy of 16/20/24/28/32 bytes corresponds to 12/15/18/21/24 words.
    """
    __slots__ = ("entropy", "language")

    def __init__(self, entropy: bytes, language: str = WALLET.DEFAULT_LANGUAGE):
        if len(entropy) not in ALLOWED_ENTROPY_BYTELEN:
            raise InvalidEntropyLength(
                f"Entropy byte length {len(entropy)} not BIP39 compliant. Must be one of {ALLOWED_ENTROPY_BYTELEN}")
        self.entropy = entropy
        self.language = language

    def __eq__(self, other):
        if not isinstance(other, Mnemonic):
            return False
        return self.entropy == other.entropy and self.language == other.language

    def __hash__(self):
        return hash((self.entropy, self.language))

    def __repr__(self):
        return f"Mnemonic(words={self.word_count}, language={self.language})"

    # --- CONSTRUCTORS --- #

    @classmethod
    def generate(cls, word_count: int = 12, language: str = WALLET.DEFAULT_LANGUAGE,
                 rng: Callable[[int], bytes] = secrets.token_bytes):
        """
        Create a new mnemonic with entropy from the given random source
        """
        entropy_bytelen = WORD_COUNTS.get(word_count)
        if entropy_bytelen is None:
            raise InvalidWordCount(f"Word count {word_count} not one of {tuple(WORD_COUNTS)}")
        return cls(rng(entropy_bytelen), language)

    @classmethod
    def from_entropy(cls, entropy: bytes, language: str = WALLET.DEFAULT_LANGUAGE):
        return cls(entropy, language)

    @classmethod
    def from_phrase(cls, phrase: str, language: str = WALLET.DEFAULT_LANGUAGE):
        """
        Recover the entropy from a phrase. The phrase must re-encode to exactly the given string.
        """
        words = phrase.split()
        entropy_bytelen = WORD_COUNTS.get(len(words))
        if entropy_bytelen is None:
            raise InvalidWordCount(f"Phrase has {len(words)} words, expected one of {tuple(WORD_COUNTS)}")

        word_index = {word: index for index, word in enumerate(load_wordlist(language))}

        # Pack the 11-bit indices
        ent_check = 0
        for word in words:
            index = word_index.get(word)
            if index is None:
                raise InvalidWord(f"Word not in {language} wordlist: {word}")
            ent_check = (ent_check << WORD_BITS) | index

        # Drop the checksum bits
        checksum_bitlen = WALLET.MNEMONIC[entropy_bytelen][CHECKSUM_KEY]
        entropy = (ent_check >> checksum_bitlen).to_bytes(entropy_bytelen, "big")

        mnemonic = cls(entropy, language)
        if mnemonic.to_phrase() != phrase:
            raise InvalidPhrase("Phrase failed checksum validation")
        return mnemonic

    @classmethod
    def verify_phrase(cls, phrase: str, language: str = WALLET.DEFAULT_LANGUAGE) -> bool:
        try:
            cls.from_phrase(phrase, language)
        except (InvalidWordCount, InvalidWord, InvalidPhrase):
            return False
        return True

    # --- PROPERTIES --- #

    @property
    def word_count(self) -> int:
        return WALLET.MNEMONIC[len(self.entropy)][WALLET.WORD_KEY]

    # --- METHODS --- #

    def _checksum(self) -> int:
        """The leading ENT/32 bits of SHA256(entropy)"""
        checksum_bitlen = WALLET.MNEMONIC[len(self.entropy)][CHECKSUM_KEY]
        return sha256(self.entropy)[0] >> (8 - checksum_bitlen)

    def words(self) -> list[str]:
        checksum_bitlen = WALLET.MNEMONIC[len(self.entropy)][CHECKSUM_KEY]
        ent_check = (int.from_bytes(self.entropy, "big") << checksum_bitlen) | self._checksum()

        wordlist = load_wordlist(self.language)
        mask = (1 << WORD_BITS) - 1
        shifts = range((self.word_count - 1) * WORD_BITS, -1, -WORD_BITS)
        return [wordlist[(ent_check >> shift) & mask] for shift in shifts]

    def to_phrase(self) -> str:
        delimiter = IDEOGRAPHIC_SPACE if self.language == "japanese" else " "
        return delimiter.join(self.words())

    def to_seed(self, password: str = "") -> bytes:
        """
        Returns the 64-byte BIP39 seed: PBKDF2-HMAC-SHA512(phrase, "mnemonic" + password, 2048 rounds)
        """
        return pbkdf2(self.to_phrase(), password, WALLET.SEED_ITERATIONS, WALLET.DKLEN)

    def to_extended_private_key(self, password: str = "", address_format: AddressFormat = AddressFormat.P2PKH,
                                network: NetworkProfile = MAINNET) -> ExtendedKey:
        logger.debug(f"Creating {network} master key from {self.word_count}-word mnemonic")
        return ExtendedKey.new_master(self.to_seed(password), address_format, network)

    def to_extended_public_key(self, password: str = "", address_format: AddressFormat = AddressFormat.P2PKH,
                               network: NetworkProfile = MAINNET) -> ExtendedKey:
        return self.to_extended_private_key(password, address_format, network).to_extended_public_key()
