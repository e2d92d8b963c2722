"""
Intervention segmentation - split a report's well history into dated blocks.
"""
import calendar
import re

from engine.coerce import deaccent

HISTORICO_RE = re.compile(r"HIST[OÓ]RICO\s+(?:DE|DO)\s+PO[ZCÇ]O|HISTORIAL\s+DEL\s+POZO", re.IGNORECASE)

MONTHS = {
    "jan": 1, "janeiro": 1, "ene": 1, "enero": 1,
    "fev": 2, "feb": 2, "fevereiro": 2, "febrero": 2,
    "mar": 3, "marco": 3, "marzo": 3,
    "abr": 4, "abril": 4,
    "mai": 5, "may": 5, "mayo": 5,
    "jun": 6, "junho": 6, "junio": 6,
    "jul": 7, "julho": 7, "julio": 7,
    "ago": 8, "agosto": 8,
    "set": 9, "sep": 9, "sept": 9, "setembro": 9, "septiembre": 9,
    "out": 10, "oct": 10, "outubro": 10, "octubre": 10,
    "nov": 11, "novembro": 11, "noviembre": 11,
    "dez": 12, "dic": 12, "dezembro": 12, "diciembre": 12,
}
# "março" is matched in the line regex; to_iso works on deaccented text
MONTH_TOKENS = sorted(set(MONTHS) | {"março"}, key=len, reverse=True)

DMY = r"\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}"
YMD = r"\d{4}-\d{2}-\d{2}"
MONY = r"(?:%s)[/-]\d{2,4}" % "|".join(MONTH_TOKENS)
DMY_RANGE = r"\d{1,2}\s*(?:a|al|–|-|—)\s*\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}"

# the date must open the line
DATE_LINE_RE = re.compile(r"^([ \t]*(?:%s|%s|%s|%s))\b" % (DMY_RANGE, DMY, YMD, MONY), re.IGNORECASE | re.MULTILINE)


def clean(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\u00a0", " ")
    text = re.sub(r"[ \t]+\n", "\n", text)
    return text.strip()


def slice_from_historico(full: str) -> str:
    """Drop everything before the well-history heading, if there is one."""
    m = HISTORICO_RE.search(full)
    return full[m.start():] if m else full


def _year(y: str) -> int:
    n = int(y)
    if n < 100:
        n = 1900 + n if n >= 50 else 2000 + n
    return n


def _iso(y: int, mo: int, d: int) -> str | None:
    if not (1 <= mo <= 12) or not (1 <= d <= calendar.monthrange(y, mo)[1]):
        return None
    return f"{y:04d}-{mo:02d}-{d:02d}"


def to_iso(label) -> str | None:
    """
    Parse a date label from a report into YYYY-MM-DD.
    Supports dd/mm/yy(yy), yyyy-mm-dd, "12 de mayo de 1982", MON/yy (last day
    of month) and day ranges "03 a 09/02/2014" (end date).
    """
    if not label:
        return None
    t = label.strip()
    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", t):
        return t
    norm = deaccent(t).lower()

    m = re.search(r"(\d{1,2})\s*(?:a|al|–|-|—)\s*(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2,4})", norm)
    if m:
        return _iso(_year(m.group(4)), int(m.group(3)), int(m.group(2)))

    m = re.search(r"(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2,4})", t)
    if m:
        return _iso(_year(m.group(3)), int(m.group(2)), int(m.group(1)))

    m = re.search(r"(\d{1,2})\s+de\s+([a-z]{3,12})\s+(?:de\s+)?(\d{2,4})", norm)
    if m and m.group(2) in MONTHS:
        return _iso(_year(m.group(3)), MONTHS[m.group(2)], int(m.group(1)))

    m = re.search(r"([a-z]{3,12})[/-](\d{2,4})", norm)
    if m and m.group(1) in MONTHS:
        y = _year(m.group(2))
        mo = MONTHS[m.group(1)]
        return _iso(y, mo, calendar.monthrange(y, mo)[1])
    return None


def split_by_date_strict(block: str) -> list:
    """
    Split text at every line that starts with a date.
    Text without any dated line is a single undated intervention.
    """
    text = clean(block)
    starts = [(m.start(), m.group(1).strip()) for m in DATE_LINE_RE.finditer(text)]
    if not starts:
        return [{"index": 1, "fecha_texto": None, "fecha_iso": None, "text": text}] if text else []

    parts = []
    for k, (start, label) in enumerate(starts):
        end = starts[k + 1][0] if k + 1 < len(starts) else len(text)
        chunk = text[start:end].rstrip()
        if chunk:
            parts.append({
                "index": len(parts) + 1,
                "fecha_texto": label,
                "fecha_iso": to_iso(label),
                "text": chunk,
            })
    return parts


def segment_report_text(full: str) -> list:
    """Well history of a report as a list of {index, fecha_texto, fecha_iso, text}."""
    return split_by_date_strict(slice_from_historico(full or ""))
