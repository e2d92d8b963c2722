"""
Value coercion for untrusted extraction output.
Every numeric field of every entity goes through to_num.
"""
import math
import re
import unicodedata

_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_num(value) -> float | None:
    """
    Coerce a number or numeric string to float.
    "561,0" -> 561.0, "561,0 m" -> 561.0, "abc" -> None. Non-finite values are None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        s = re.sub(r"\s", "", value).replace(",", ".", 1)
        m = _FLOAT_PREFIX.match(s)
        if not m:
            return None
        n = float(m.group(0))
        return n if math.isfinite(n) else None
    return None


def pick_str(*candidates) -> str | None:
    """First candidate that is a string with visible content."""
    for v in candidates:
        if isinstance(v, str) and v.strip():
            return v
    return None


def pick_obj(*candidates) -> dict | None:
    """First candidate that is a mapping."""
    for v in candidates:
        if isinstance(v, dict):
            return v
    return None


def first_of(raw, *names):
    """Read the first non-null of several alias keys from a dict or attribute holder."""
    for name in names:
        if isinstance(raw, dict):
            v = raw.get(name)
        else:
            v = getattr(raw, name, None)
        if v is not None:
            return v
    return None


def deaccent(text: str) -> str:
    """Strip combining diacritics: 'ácido' -> 'acido'."""
    return "".join(ch for ch in unicodedata.normalize("NFD", text) if not unicodedata.combining(ch))
