from __future__ import annotations

import unicodedata
from typing import Iterable


# Space, then punctuation in CLDR root order, all ahead of digits and letters.
_PUNCT_ORDER = " _-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"
_PUNCT_TABLE = str.maketrans({ch: chr(i) for i, ch in enumerate(_PUNCT_ORDER)})


def collation_key(name: str) -> tuple[str, str, str, str]:
    """Sort key approximating a locale comparison for Latin-script names.

    Primary level ignores accents and case ("Capão" sorts with "Capao") and
    orders punctuation like CLDR ("-" before "'"), then accents break ties,
    then case (lowercase first). Symbols outside the table above keep their
    code point order.
    """
    decomposed = unicodedata.normalize("NFD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold().translate(_PUNCT_TABLE), decomposed.casefold(), decomposed.swapcase(), name)


def locale_sorted(names: Iterable[str]) -> list[str]:
    return sorted(names, key=collation_key)
