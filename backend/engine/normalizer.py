"""
Entity normalizer.

Turns the loosely typed JSON returned by the extraction model into tagged
records (PunzadoItem, CementacionItem, EnsayoItem, EstimulacionItem). Nothing in
here raises on bad input: wrong shapes degrade to empty collections or null
fields. Alias keys (from/to, unit, camelCase vs snake_case) are accepted because
the model is not consistent about them.
"""
import re
from dataclasses import dataclass, field

from .coerce import to_num, pick_str, pick_obj, first_of, deaccent
from .well_state import RejectedItem

FLUID_CLASSES = (
    "oleo",
    "agua",
    "gas",
    "oleo_y_agua",
    "agua_y_oleo",
    "oleo_y_gas",
    "gas_y_oleo",
    "agua_y_gas",
    "gas_y_agua",
    "no_especificado",
)

CEMENT_TYPES = ("cementacion", "squeeze", "tampon_cemento", "bpp")
DEFAULT_CEMENT_TYPE = "cementacion"

STIMULATION_TYPES = ("acidizacion", "fractura", "minifractura")
DEFAULT_STIMULATION_TYPE = "acidizacion"

_MINIFRAC_RE = re.compile(r"mini[\s-]?(?:frac|fract|fratur)", re.IGNORECASE)
_FRAC_RE = re.compile(r"\b(?:fratur|fract|frac)", re.IGNORECASE)
_ACID_RE = re.compile(r"acid", re.IGNORECASE)

# flow-rate units (volume over time) and pressure-normalized markers
_RATE_UNIT_RE = re.compile(r"(?:\bm3/d|\bm³/d|\bbbl/d|\bbpd\b|\bmpcd\b|\bbpm\b|\bl/s\b|\bqt\s*=)", re.IGNORECASE)
_PRESSURE_RATE_RE = re.compile(r"(?:/\s*kgf?/?cm2\b|\bkgf?/?cm2\b|\bkgf?/?cm²|\bIP\b)", re.IGNORECASE)


@dataclass
class RawInterval:
    """Interval as reported by the model; bounds may be missing."""
    desde: float | None = None
    hasta: float | None = None
    unidad: str | None = "m"

    def to_dict(self):
        return {"desde": self.desde, "hasta": self.hasta, "unidad": self.unidad}

    @property
    def complete(self) -> bool:
        return self.desde is not None and self.hasta is not None


@dataclass
class Measure:
    valor: float | None = None
    unidad: str | None = None

    def to_dict(self):
        return {"valor": self.valor, "unidad": self.unidad}


@dataclass
class PunzadoItem:
    desde: float | None = None
    hasta: float | None = None
    unidad: str | None = "m"

    def to_dict(self):
        return {"desde": self.desde, "hasta": self.hasta, "unidad": self.unidad}


@dataclass
class CementacionItem:
    tipo: str = DEFAULT_CEMENT_TYPE
    intervalo: RawInterval | None = None
    profundidad: float | None = None
    unidad_profundidad: str | None = None
    zona: str | None = None
    observacion: str | None = None

    def to_dict(self):
        return {
            "tipo": self.tipo,
            "intervalo": self.intervalo.to_dict() if self.intervalo else None,
            "profundidad": self.profundidad,
            "unidad_profundidad": self.unidad_profundidad,
            "zona": self.zona,
            "observacion": self.observacion,
        }


ENSAYO_TEXT_FIELDS = {
    # attribute: accepted keys
    "nombre": ("nombre", "name"),
    "numero": ("numero",),
    "fecha": ("fecha", "date"),
    "fluido_recuperado": ("fluidoRecuperado", "fluido_recuperado"),
    "fluido_clasificacion": ("fluidoClasificacion", "fluido_clasificacion", "clasificacion"),
    "recuperado_texto": ("recuperadoTexto", "recuperado_texto"),
    "vazao": ("vazao", "caudal", "flow"),
    "swab": ("swab",),
    "nivel_fluido": ("nivelFluido", "nivel_fluido"),
    "salinidad": ("salinidad", "salinidade"),
    "bsw": ("bsw",),
    "grados_api": ("gradosAPI", "grados_api"),
    "sopro": ("sopro",),
    "presion": ("presion", "pressao"),
    "observacion": ("observacion", "obs"),
}


@dataclass
class EnsayoItem:
    __test__ = False  # not a pytest class

    intervalo: RawInterval | None = None
    total_recuperado: Measure | None = None
    nombre: str | None = None
    numero: str | None = None
    fecha: str | None = None
    fluido_recuperado: str | None = None
    fluido_clasificacion: str | None = None
    recuperado_texto: str | None = None
    vazao: str | None = None
    swab: str | None = None
    nivel_fluido: str | None = None
    salinidad: str | None = None
    bsw: str | None = None
    grados_api: str | None = None
    sopro: str | None = None
    presion: str | None = None
    observacion: str | None = None

    def to_dict(self):
        data = {name: getattr(self, name) for name in ENSAYO_TEXT_FIELDS}
        data["intervalo"] = self.intervalo.to_dict() if self.intervalo else None
        data["total_recuperado"] = self.total_recuperado.to_dict() if self.total_recuperado else None
        return data


@dataclass
class EstimulacionItem:
    tipo: str = DEFAULT_STIMULATION_TYPE
    fecha: str | None = None
    intervalo: RawInterval | None = None
    fluido: str | None = None
    presion_inicial: str | None = None
    presion_media: str | None = None
    presion_final: str | None = None
    vazao: str | None = None
    volumen: Measure | None = None
    observacion: str | None = None

    def to_dict(self):
        return {
            "tipo": self.tipo,
            "fecha": self.fecha,
            "intervalo": self.intervalo.to_dict() if self.intervalo else None,
            "fluido": self.fluido,
            "presion_inicial": self.presion_inicial,
            "presion_media": self.presion_media,
            "presion_final": self.presion_final,
            "vazao": self.vazao,
            "volumen": self.volumen.to_dict() if self.volumen else None,
            "observacion": self.observacion,
        }


@dataclass
class ExtractedInterventionPayload:
    """Normalized extraction result for one intervention, the input of the fold."""
    fecha: str | None = None
    resumen: str | None = None
    punzados: list = field(default_factory=list)
    cementaciones: list = field(default_factory=list)
    tests: list = field(default_factory=list)
    estimulaciones: list = field(default_factory=list)
    # items dropped before the fold (RejectedItem); the fold copies them into state.rejected
    rejected: list = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.punzados or self.cementaciones or self.tests or self.estimulaciones)

    def reject(self, kind, reason, item) -> None:
        self.rejected.append(rejected_item(kind, reason, item))

    def to_dict(self):
        return {
            "fecha": self.fecha,
            "resumen": self.resumen,
            "punzados": [p.to_dict() for p in self.punzados],
            "cementaciones": [c.to_dict() for c in self.cementaciones],
            "tests": [t.to_dict() for t in self.tests],
            "estimulaciones": [e.to_dict() for e in self.estimulaciones],
            "rejected": [r.to_dict() for r in self.rejected],
        }

    @classmethod
    def from_dict(cls, data) -> "ExtractedInterventionPayload":
        # stored payloads are already normalized; running them through again is a no-op
        return normalize_payload(data)


def sanitize_vazao(text) -> str | None:
    """
    Keep a flow-rate text only if it carries a volume/time unit and no
    pressure-normalized marker. Productivity indices ("IP = 0,126 m3/d/kg/cm2")
    are not flow rates.
    """
    if not isinstance(text, str) or not text.strip():
        return None
    txt = text.strip()
    if _PRESSURE_RATE_RE.search(txt):
        return None
    if not _RATE_UNIT_RE.search(txt):
        return None
    return txt


def classify_stimulation(label) -> str:
    """
    Map a free-text treatment label to one of STIMULATION_TYPES.
    Unrecognized labels fall back to acidizacion.
    """
    s = deaccent(label).lower() if isinstance(label, str) else ""
    if _MINIFRAC_RE.search(s):
        return "minifractura"
    if _FRAC_RE.search(s):
        return "fractura"
    if _ACID_RE.search(s):
        return "acidizacion"
    return DEFAULT_STIMULATION_TYPE


def normalize_cement_type(label) -> str:
    if not isinstance(label, str):
        return DEFAULT_CEMENT_TYPE
    key = re.sub(r"[\s\-]+", "_", deaccent(label).strip().lower())
    return key if key in CEMENT_TYPES else DEFAULT_CEMENT_TYPE


def normalize_interval(raw, default_unit="m") -> RawInterval | None:
    """Interval-shaped dict to RawInterval; non-dicts give None."""
    src = pick_obj(raw)
    if src is None:
        return None
    return RawInterval(
        desde=to_num(first_of(src, "desde", "from", "start")),
        hasta=to_num(first_of(src, "hasta", "to", "end")),
        unidad=pick_str(src.get("unidad"), src.get("unit")) or default_unit,
    )


def normalize_measure(raw) -> Measure | None:
    src = pick_obj(raw)
    if src is None:
        return None
    return Measure(
        valor=to_num(first_of(src, "valor", "value")),
        unidad=pick_str(src.get("unidad"), src.get("unit")),
    )


def rejected_item(kind, reason, item) -> RejectedItem:
    raw = item.to_dict() if hasattr(item, "to_dict") else item
    return RejectedItem(kind=kind, reason=reason, raw=raw if isinstance(raw, dict) else {"value": raw})


def _drop(rejected, kind, reason, item):
    if rejected is not None:
        rejected.append(rejected_item(kind, reason, item))


def normalize_punzados(arr, rejected=None) -> list:
    """
    Items with at least one bound survive; the fold drops the incomplete ones.
    Items dropped here are recorded in rejected when a list is given.
    """
    if not isinstance(arr, list):
        return []
    out = []
    for raw in arr:
        if not isinstance(raw, dict):
            _drop(rejected, "punzado", "not an object", raw)
            continue
        desde = to_num(first_of(raw, "desde", "from", "start"))
        hasta = to_num(first_of(raw, "hasta", "to", "end"))
        if desde is None and hasta is None:
            _drop(rejected, "punzado", "missing interval", raw)
            continue
        out.append(PunzadoItem(desde=desde, hasta=hasta, unidad=pick_str(raw.get("unidad"), raw.get("unit")) or "m"))
    return out


def normalize_cementaciones(arr, rejected=None) -> list:
    if not isinstance(arr, list):
        return []
    out = []
    for raw in arr:
        if not isinstance(raw, dict):
            _drop(rejected, "cementacion", "not an object", raw)
            continue
        profundidad = to_num(raw.get("profundidad"))
        out.append(
            CementacionItem(
                tipo=normalize_cement_type(raw.get("tipo")),
                intervalo=normalize_interval(first_of(raw, "intervalo", "interval")),
                profundidad=profundidad,
                unidad_profundidad=pick_str(
                    raw.get("unidadProfundidad"), raw.get("unidad_profundidad"), raw.get("profUnit")
                )
                or ("m" if profundidad is not None else None),
                zona=pick_str(raw.get("zona")),
                observacion=pick_str(raw.get("observacion")),
            )
        )
    return out


def normalize_ensayos(arr, rejected=None) -> list:
    if not isinstance(arr, list):
        return []
    out = []
    for raw in arr:
        if not isinstance(raw, dict):
            _drop(rejected, "test", "not an object", raw)
            continue
        texts = {name: pick_str(*(raw.get(k) for k in keys)) for name, keys in ENSAYO_TEXT_FIELDS.items()}
        texts["vazao"] = sanitize_vazao(texts["vazao"])
        if texts["fluido_clasificacion"] not in FLUID_CLASSES:
            texts["fluido_clasificacion"] = None
        out.append(
            EnsayoItem(
                intervalo=normalize_interval(first_of(raw, "intervalo", "interval")),
                total_recuperado=normalize_measure(first_of(raw, "totalRecuperado", "total_recuperado")),
                **texts,
            )
        )
    return out


def normalize_estimulaciones(arr, rejected=None) -> list:
    if not isinstance(arr, list):
        return []
    out = []
    for raw in arr:
        if not isinstance(raw, dict):
            _drop(rejected, "estimulacion", "not an object", raw)
            continue
        out.append(
            EstimulacionItem(
                tipo=classify_stimulation(pick_str(raw.get("tipo"), raw.get("nombre"))),
                fecha=pick_str(raw.get("fecha"), raw.get("date")),
                intervalo=normalize_interval(first_of(raw, "intervalo", "interval")),
                fluido=pick_str(raw.get("fluido"), raw.get("acido"), raw.get("acid")),
                presion_inicial=pick_str(raw.get("presionInicial"), raw.get("presion_inicial"), raw.get("pressaoInicial")),
                presion_media=pick_str(raw.get("presionMedia"), raw.get("presion_media"), raw.get("pressaoMedia")),
                presion_final=pick_str(raw.get("presionFinal"), raw.get("presion_final"), raw.get("pressaoFinal")),
                vazao=sanitize_vazao(pick_str(raw.get("vazao"), raw.get("caudal"), raw.get("flow"))),
                volumen=normalize_measure(first_of(raw, "volumen", "volume")),
                observacion=pick_str(raw.get("observacion"), raw.get("obs")),
            )
        )
    return out


def normalize_payload(raw, fecha=None) -> ExtractedInterventionPayload:
    """
    Normalize one extraction response. A non-dict response is an empty payload.
    The explicit fecha wins over the one in the response.
    """
    if not isinstance(raw, dict):
        return ExtractedInterventionPayload(fecha=pick_str(fecha))
    # rejections stored with an earlier payload come back first
    rejected = [
        RejectedItem.from_dict(r)
        for r in raw.get("rejected") or []
        if isinstance(r, dict) and "kind" in r and "reason" in r
    ]
    return ExtractedInterventionPayload(
        fecha=pick_str(fecha, raw.get("fecha")),
        resumen=pick_str(raw.get("resumen")),
        punzados=normalize_punzados(raw.get("punzados"), rejected),
        cementaciones=normalize_cementaciones(raw.get("cementaciones"), rejected),
        tests=normalize_ensayos(raw.get("tests"), rejected),
        estimulaciones=normalize_estimulaciones(raw.get("estimulaciones"), rejected),
        rejected=rejected,
    )
