"""
Loads a given BIP39 wordlist
"""
from functools import lru_cache

from mnemonic import Mnemonic as _MnemonicWordlists

from bitwallet.core import WALLET, MnemonicError

__all__ = ["load_wordlist", "available_languages"]


def available_languages() -> list[str]:
    """Return the names of the bundled BIP39 wordlists"""
    return _MnemonicWordlists.list_languages()


@lru_cache(maxsize=None)
def load_wordlist(language: str = WALLET.DEFAULT_LANGUAGE) -> tuple[str, ...]:
    """Return the 2048-word BIP39 wordlist for the given language."""
    if language not in available_languages():
        raise MnemonicError(f"Unknown wordlist language: {language}")

    wordlist = tuple(_MnemonicWordlists(language).wordlist)
    if len(wordlist) != WALLET.WORDLIST_SIZE:
        raise MnemonicError(f"Wordlist {language} has {len(wordlist)} words, expected {WALLET.WORDLIST_SIZE}")
    return wordlist
