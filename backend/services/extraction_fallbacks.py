"""
Deterministic repairs of extraction output.

The extraction model misses intervals it could have read from the block,
reports perforations that never happened and mixes flow rates with
productivity indices. These heuristics run on the normalized payload, using
the original block text as context.
"""
import re

from engine.coerce import to_num, deaccent
from engine.normalizer import FLUID_CLASSES, Measure, RawInterval, sanitize_vazao

DOMAIN_TYPOS = [
    (re.compile(r"\bBBP\b", re.IGNORECASE), "BPP"),
    (re.compile(r"\bDUO\s*LINE\b", re.IGNORECASE), "DUOLINE"),
    (re.compile(r"\bPCK\b", re.IGNORECASE), "PACKER"),
    (re.compile(r"\bCPS\s*-?\s*(\d+)\b", re.IGNORECASE), r"CPS-\1"),
    (re.compile(r"\bVAZ[ÃA]O\b", re.IGNORECASE), "VAZAO"),
]

ZONE_RANGE_RE = re.compile(
    r"(CPS[-\s]?\d+(?:\s*[+/]\s*CPS[-\s]?\d+)*)[^.\n\r]*?\(\s*([0-9]{3,4}[.,]?\d*)\s*[–\-/]\s*([0-9]{3,4}[.,]?\d*)\s*m\s*\)",
    re.IGNORECASE,
)
ZONE_MENTION_RE = re.compile(r"CPS[-\s]?\d+(?:\s*[+/]\s*CPS[-\s]?\d+)*", re.IGNORECASE)
MAIN_INTERVAL_RE = re.compile(r"Int\.\s*([0-9]{3,4}[.,]?\d*)\s*[/–-]\s*([0-9]{3,4}[.,]?\d*)\s*m", re.IGNORECASE)
PACKER_DEPTH_RE = re.compile(r"(PACKER|PCK)[^.\n\r]{0,40}?a\s*([0-9]{3,4}[.,]?\d*)\s*m", re.IGNORECASE)
BPP_RE = re.compile(r"\bBPP\b([^.\n\r]{0,80}?)(?:a\s*)?([0-9]{3,4}[.,]?\d*)\s*m", re.IGNORECASE)

TOTAL_RECOVERED_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*(m3|m³|m|bbl|l|gal)\b", re.IGNORECASE)
UNIT_ALIASES = {"m³": "m3", "bbls": "bbl", "lt": "l", "lts": "l"}

PERFORATION_WORDS_RE = re.compile(r"(canhone|punzad|perforad|tiros?)", re.IGNORECASE)
INJECTIVITY_RE = re.compile(r"INYE|INJETIV|PACKER|PCK", re.IGNORECASE)

MANDATORY_EVENT_RES = {
    "punzado": re.compile(r"(canhone|punzad|perforad)", re.IGNORECASE),
    "ensayo": re.compile(r"\b(TF-?\d|TFR-?\d|DST|Teste\s+de\s+Avalia|inyectivid|injetiv|swab)\b", re.IGNORECASE),
    "solo_presion": re.compile(
        r"(sonolog|press[aã]o\s+est[aá]tica|registro\s+de\s+press[aã]o|buildup|fall[- ]?off|Pcab)", re.IGNORECASE
    ),
    "cementacion": re.compile(r"(cimenta|squeeze|BBP\b|BPP\b|tap[oã]n)", re.IGNORECASE),
    "estimulacion": re.compile(r"(mini?fratur|fratur|acidiza|estimul)", re.IGNORECASE),
}
COMPLEXITY_INTERVAL_RE = re.compile(r"\b\d{3,4}[.,]?\d*\s*[-–/]\s*\d{3,4}[.,]?\d*\s*m\b", re.IGNORECASE)
COMPLEXITY_KEYWORD_RE = re.compile(
    r"\b(PACKER|B[- ]?TANDEM|BBP|BPP|BPR|RPS|MINI?FRATUR|INJETIV|TCZ|DUOLINE|CPS-\d|TF-?\d|TFR-?\d)\b", re.IGNORECASE
)
EXTENDED_THRESHOLD = 6


def normalize_domain_typos(text: str) -> str:
    for pattern, repl in DOMAIN_TYPOS:
        text = pattern.sub(repl, text)
    return text


def has_mandatory_events(text: str) -> bool:
    s = normalize_domain_typos(text)
    r = MANDATORY_EVENT_RES
    ensayo_valido = bool(r["ensayo"].search(s)) and not r["solo_presion"].search(s)
    return bool(r["punzado"].search(s) or ensayo_valido or r["cementacion"].search(s) or r["estimulacion"].search(s))


def detect_complexity(text: str) -> int:
    s = normalize_domain_typos(text)
    bullets = len(re.findall(r"^\s*[-•]", s, re.MULTILINE))
    intervals = len(COMPLEXITY_INTERVAL_RE.findall(s))
    keywords = len(COMPLEXITY_KEYWORD_RE.findall(s))
    mandatory = 3 if has_mandatory_events(s) else 0
    long_bonus = 2 if len(s) > 1500 else 1 if len(s) > 800 else 0
    return bullets + intervals + keywords + mandatory + long_bonus


def pick_detail(mode: str | None, text: str) -> str:
    """Resolve "auto" to "breve" or "extendido"."""
    if mode in ("breve", "extendido"):
        return mode
    if has_mandatory_events(text):
        return "extendido"
    return "extendido" if detect_complexity(text) >= EXTENDED_THRESHOLD else "breve"


def extract_context_ranges(text: str):
    """Zone ranges, main block intervals and packer depths mentioned in the block."""
    zone_ranges = {}
    for m in ZONE_RANGE_RE.finditer(text):
        desde, hasta = to_num(m.group(2)), to_num(m.group(3))
        if desde is not None and hasta is not None:
            zone_ranges[re.sub(r"\s+", "", m.group(1)).upper()] = RawInterval(desde, hasta, "m")

    main_intervals = []
    for m in MAIN_INTERVAL_RE.finditer(text):
        desde, hasta = to_num(m.group(1)), to_num(m.group(2))
        if desde is not None and hasta is not None:
            main_intervals.append(RawInterval(desde, hasta, "m"))

    packer_depths = [d for d in (to_num(m.group(2)) for m in PACKER_DEPTH_RE.finditer(text)) if d is not None]
    return zone_ranges, main_intervals, packer_depths


def _has_any_bound(iv) -> bool:
    return iv is not None and (iv.desde is not None or iv.hasta is not None)


def _copy(iv: RawInterval) -> RawInterval:
    return RawInterval(iv.desde, iv.hasta, iv.unidad)


def fill_missing_test_intervals(tests: list, text: str) -> list:
    zone_ranges, main_intervals, packer_depths = extract_context_ranges(text)
    for t in tests:
        if _has_any_bound(t.intervalo):
            continue
        name_obs = normalize_domain_typos(f"{t.nombre or ''} {t.observacion or ''}").upper()
        for z in ZONE_MENTION_RE.findall(name_obs):
            r = zone_ranges.get(re.sub(r"\s+", "", z))
            if r:
                t.intervalo = _copy(r)
                break
        else:
            if INJECTIVITY_RE.search(name_obs) and packer_depths:
                d = packer_depths[0]
                t.intervalo = RawInterval(d, d, "m")
            elif main_intervals:
                t.intervalo = _copy(main_intervals[0])
    return tests


def fill_missing_cement_intervals(items: list, text: str) -> list:
    zone_ranges, main_intervals, _ = extract_context_ranges(text)
    for c in items:
        if c.tipo == "bpp" or _has_any_bound(c.intervalo):
            continue
        r = zone_ranges.get(re.sub(r"\s+", "", normalize_domain_typos(c.zona)).upper()) if c.zona else None
        if r:
            c.intervalo = _copy(r)
        elif main_intervals:
            c.intervalo = _copy(main_intervals[0])
    return items


def filter_cementaciones_for_perforated(items: list, payload=None) -> list:
    """
    Bridge plugs always stay; cementing needs a complete interval over perforations.
    Dropped items are recorded on payload.rejected when a payload is given.
    """
    out = []
    for c in items:
        if c.tipo == "bpp" or (c.intervalo is not None and c.intervalo.complete):
            out.append(c)
        elif payload is not None:
            payload.reject(c.tipo, "missing interval", c)
    return out


def filter_punzados_by_keywords(text: str, punzados: list, payload=None) -> list:
    if PERFORATION_WORDS_RE.search(text):
        return punzados
    if payload is not None:
        for p in punzados:
            payload.reject("punzado", "no perforation mentioned in block", p)
    return []


def extract_recuperado_texto(text: str) -> str | None:
    matches = [m.group(0) for m in re.finditer(r"\b(?:Recuperad[oa]s?|Recuperou)\b[^.\n\r]*(?:\.[^\n\r]*)?", text, re.IGNORECASE)]
    if not matches:
        return None
    return re.sub(r"[ \t]+", " ", " ".join(matches)).strip()


def guess_fluido(recuperado: str | None) -> str | None:
    if not recuperado:
        return None
    parts = []
    if re.search(r"\b(óleo|oleo|aceite|petro(?:leo)?)\b", recuperado, re.IGNORECASE):
        parts.append("óleo")
    if re.search(r"\b(água|agua)\b", recuperado, re.IGNORECASE):
        parts.append("agua")
    if re.search(r"\bg[aá]s\b", recuperado, re.IGNORECASE):
        parts.append("gas")
    return " y ".join(parts) if parts else None


def classify_fluido_recuperado(s) -> str | None:
    """Fixed fluid class for a recovered-fluid text; mixtures keep the order they are written in."""
    if not isinstance(s, str):
        return None
    t = deaccent(s).lower()
    has_oil = bool(re.search(r"(oleo|petroleo)", t))
    has_water = bool(re.search(r"\bagua\b", t))
    has_gas = bool(re.search(r"\bgas\b", t))
    io, iw, ig = t.find("oleo"), t.find("agua"), t.find("gas")
    if has_oil and has_water and not has_gas:
        return "oleo_y_agua" if io >= 0 and (iw < 0 or io <= iw) else "agua_y_oleo"
    if has_oil and has_gas and not has_water:
        return "oleo_y_gas" if io >= 0 and (ig < 0 or io <= ig) else "gas_y_oleo"
    if has_water and has_gas and not has_oil:
        return "agua_y_gas" if iw >= 0 and (ig < 0 or iw <= ig) else "gas_y_agua"
    if has_oil:
        return "oleo"
    if has_water:
        return "agua"
    if has_gas:
        return "gas"
    return "no_especificado"


def normalize_unit(u: str | None) -> str | None:
    if not u:
        return None
    s = re.sub(r"\s+", "", u.lower())
    return UNIT_ALIASES.get(s, s)


def infer_total_from_text(text: str | None) -> Measure | None:
    """First volume in a recovered-fluid text, e.g. "Recuperou 12 m3 de óleo" -> 12 m3."""
    if not text:
        return None
    m = TOTAL_RECOVERED_RE.search(text)
    if not m or to_num(m.group(1)) is None:
        return None
    return Measure(valor=to_num(m.group(1)), unidad=normalize_unit(m.group(2)))


def normalize_fluid_terms(s: str | None) -> str | None:
    if not s:
        return s
    return re.sub(r"\baceites?\b", "óleo", s, flags=re.IGNORECASE)


def extract_sopro_block(text: str) -> str | None:
    """First sopro/flow/surgency passage, cut at a blank line or the next metric."""
    norm = text.replace("\r", "")
    start = re.search(r"\b(sopro|fluxo|flujo|surg(?:iu|i[oó])|surg[êe]ncia|surgencia)\b", norm, re.IGNORECASE)
    if not start:
        return None
    after = norm[start.start():]
    end = len(after)
    para = re.search(r"\n\s*\n", after)
    if para:
        end = min(end, para.start())
    stop = re.search(
        r"(Recuperad[oa]s?|Recuperou)\b|^[ \t]*(Q|Qt)\s*=|Vaz[ãa]o|^[ \t]*IP\s*=|^[ \t]*Ke\s*=|^[ \t]*Dano\s*=|"
        r"^[ \t]*Pe\s*=|Salin|^Óleo\s*:|^Oleo\s*:|^Visc\.|^[ \t]*BSW\b|^[ \t]*Grau?s?\s*API\b",
        after,
        re.IGNORECASE | re.MULTILINE,
    )
    if stop:
        end = min(end, stop.start())
    chunk = re.sub(r"[ \t]+", " ", after[:end])
    return re.sub(r"\s*([.;])\s*", r"\1 ", chunk).strip() or None


def normalize_sopro_label(s: str | None) -> str | None:
    body = re.sub(r"^sopro\b[:\s-]*", "", (s or "").strip(), flags=re.IGNORECASE).strip()
    return f"Sopro: {body}" if body else None


def is_injectivity_test(t) -> bool:
    s = f"{t.nombre or ''} {t.observacion or ''}".lower()
    return bool(re.search(r"injetiv|inyectiv|injectiv|packer", s))


def extract_injectivity_psi(text: str) -> str | None:
    """Coluna/Anular/Pressão psi readings from injectivity sentences, skipping cementing noise."""
    norm = re.sub(r"[ \t]+", " ", text.replace("\r", " "))
    sentences = [s.strip() for s in re.split(r"(?<=[.!?])\s+|[\n;]+", norm) if s and s.strip()]
    relevant = re.compile(r"(injetiv|inyectiv|injectiv|teste\s+de\s+injetiv|vaz[ãa]o|bpm)", re.IGNORECASE)
    noise = re.compile(r"(ciment|pasta\s+de\s+cimento|squeeze|tap(?:[ãa]o|on)|\bBPP\b|assentad|injetad[oa]|isolament)", re.IGNORECASE)

    out = []
    for s in sentences:
        if not re.search(r"psi\b", s, re.IGNORECASE) or not relevant.search(s) or noise.search(s):
            continue
        for m in re.finditer(r"(colu(?:n|mn)a)[^.\n\r]{0,20}?(\d+[.,]?\d*)\s*psi", s, re.IGNORECASE):
            out.append(f"Coluna {m.group(2)} psi")
        for m in re.finditer(r"(anular)[^.\n\r]{0,20}?(\d+[.,]?\d*)\s*psi", s, re.IGNORECASE):
            out.append(f"Anular {m.group(2)} psi")
        for m in re.finditer(r"press[aã]o[^.\n\r]{0,20}?(\d+[.,]?\d*)\s*psi", s, re.IGNORECASE):
            out.append(f"Pressão {m.group(1)} psi")
    uniq = list(dict.fromkeys(out))
    return "; ".join(uniq) if uniq else None


def enrich_tests(tests: list, text: str) -> list:
    sopro_in_block = extract_sopro_block(text)
    for t in tests:
        t.recuperado_texto = t.recuperado_texto or extract_recuperado_texto(text)
        t.fluido_recuperado = normalize_fluid_terms(t.fluido_recuperado or guess_fluido(t.recuperado_texto))
        if t.total_recuperado is None or t.total_recuperado.valor is None:
            t.total_recuperado = (
                infer_total_from_text(t.fluido_recuperado) or infer_total_from_text(t.recuperado_texto) or t.total_recuperado
            )
        if t.fluido_clasificacion not in FLUID_CLASSES:
            t.fluido_clasificacion = classify_fluido_recuperado(t.fluido_recuperado)
        t.sopro = normalize_sopro_label(t.sopro or sopro_in_block)
        if not t.presion and is_injectivity_test(t):
            t.presion = extract_injectivity_psi(text)
        t.vazao = sanitize_vazao(t.vazao)
        t.observacion = normalize_fluid_terms(t.observacion)
    return tests


def extract_bpp(text: str):
    """(present, depth, zone) for the first bridge plug mentioned in the block."""
    norm = normalize_domain_typos(text)
    m = BPP_RE.search(norm)
    if m:
        zone = re.search(r"\b(CPS[-\s]?\d+|SERRARIA)\b", m.group(1) or "", re.IGNORECASE)
        return True, to_num(m.group(2)), re.sub(r"\s+", "", zone.group(1)).upper() if zone else None
    if re.search(r"\bBPP\b", norm, re.IGNORECASE):
        return True, None, None
    return False, None, None


def ensure_bpp_in_resumen(resumen: str, text: str) -> str:
    present, depth, zone = extract_bpp(text)
    if not present or re.search(r"\bB[BP]P\b", resumen, re.IGNORECASE):
        return resumen
    parts = []
    if zone:
        parts.append(f"en {zone}")
    if depth is not None:
        parts.append(f"a {depth:g} m")
    extra = f" ({', '.join(parts)})" if parts else ""
    trimmed = resumen.strip()
    needs_dot = bool(trimmed) and not re.search(r"[.!?]$", trimmed)
    return f"{trimmed}{'.' if needs_dot else ''} Se aisló con BPP{extra}.".strip()


def apply_fallbacks(payload, text: str):
    """Repair a normalized payload in place using its block text. Returns the payload."""
    norm = normalize_domain_typos(text)
    payload.tests = enrich_tests(fill_missing_test_intervals(payload.tests, norm), norm)
    cem = fill_missing_cement_intervals(payload.cementaciones, norm)
    payload.cementaciones = filter_cementaciones_for_perforated(cem, payload)
    payload.punzados = filter_punzados_by_keywords(norm, payload.punzados, payload)
    resumen = re.sub(r"\s{2,}", " ", normalize_fluid_terms(payload.resumen or "")).strip()
    payload.resumen = ensure_bpp_in_resumen(resumen, norm) or None
    return payload
