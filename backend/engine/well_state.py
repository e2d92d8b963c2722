"""
Well-state aggregate.

The aggregate is plain data: every entity serializes to a JSON-compatible dict
with to_dict() and is rebuilt with from_dict(). Lists are append-only; entities
are never removed, so the completion history of the wellbore can always be
reconstructed. The only writer is engine.applier.apply_intervention.
"""
from dataclasses import dataclass, field

from .geometry import Interval

STATE_VERSION = 1

OPEN = "open"
CLOSED = "closed"
CLOSED_BY_SQUEEZE = "squeeze"
CLOSED_BY_CEMENT_PLUG = "cement_plug"


def _interval_dict(iv):
    return iv.to_dict() if iv else None


@dataclass
class Zone:
    """Named group of depth ranges, e.g. CPS-01 or CPS-03/04."""
    name: str
    intervals: list = field(default_factory=list)

    def to_dict(self):
        return {"name": self.name, "intervals": [iv.to_dict() for iv in self.intervals]}

    @classmethod
    def from_dict(cls, data):
        return cls(name=data["name"], intervals=[Interval.from_dict(iv) for iv in data.get("intervals", [])])


@dataclass
class Perforation:
    """Perforated segment. Closed by a later squeeze or cement plug, never reopened."""
    id: str
    interval: Interval
    status: str = OPEN
    zone: str | None = None
    closed_by: str | None = None
    metadata: dict = field(default_factory=dict)

    def to_dict(self):
        return {
            "id": self.id,
            "zone": self.zone,
            "interval": self.interval.to_dict(),
            "status": self.status,
            "closed_by": self.closed_by,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data["id"],
            interval=Interval.from_dict(data["interval"]),
            status=data.get("status", OPEN),
            zone=data.get("zone"),
            closed_by=data.get("closed_by"),
            metadata=dict(data.get("metadata") or {}),
        )


@dataclass
class CementPlug:
    id: str
    interval: Interval
    placed_at: str
    active: bool = True
    removed_at: str | None = None

    def to_dict(self):
        return {
            "id": self.id,
            "interval": self.interval.to_dict(),
            "active": self.active,
            "placed_at": self.placed_at,
            "removed_at": self.removed_at,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data["id"],
            interval=Interval.from_dict(data["interval"]),
            placed_at=data["placed_at"],
            active=data.get("active", True),
            removed_at=data.get("removed_at"),
        )


@dataclass
class Squeeze:
    id: str
    interval: Interval
    date: str

    def to_dict(self):
        return {"id": self.id, "interval": self.interval.to_dict(), "date": self.date}

    @classmethod
    def from_dict(cls, data):
        return cls(id=data["id"], interval=Interval.from_dict(data["interval"]), date=data["date"])


@dataclass
class Bpp:
    """Mechanical bridge plug set at a single depth."""
    id: str
    depth: float
    placed_at: str
    active: bool = True
    zone: str | None = None

    def to_dict(self):
        return {
            "id": self.id,
            "depth": self.depth,
            "active": self.active,
            "zone": self.zone,
            "placed_at": self.placed_at,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data["id"],
            depth=data["depth"],
            placed_at=data["placed_at"],
            active=data.get("active", True),
            zone=data.get("zone"),
        )


TEST_TEXT_FIELDS = (
    "nombre",
    "numero",
    "fecha",
    "fluido_recuperado",
    "fluido_clasificacion",
    "recuperado_texto",
    "vazao",
    "swab",
    "nivel_fluido",
    "salinidad",
    "bsw",
    "grados_api",
    "sopro",
    "presion",
    "observacion",
)


@dataclass
class TestLog:
    """Flow, injectivity or formation test. Log only: never changes perforations or plugs."""
    __test__ = False  # not a pytest class

    id: str
    intervalo: Interval | None = None
    nombre: str | None = None
    numero: str | None = None
    fecha: str | None = None
    fluido_recuperado: str | None = None
    fluido_clasificacion: str | None = None
    total_recuperado: dict | None = None
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
        data = {"id": self.id, "intervalo": _interval_dict(self.intervalo)}
        for name in TEST_TEXT_FIELDS:
            data[name] = getattr(self, name)
        data["total_recuperado"] = dict(self.total_recuperado) if self.total_recuperado else None
        return data

    @classmethod
    def from_dict(cls, data):
        kwargs = {name: data.get(name) for name in TEST_TEXT_FIELDS}
        return cls(
            id=data["id"],
            intervalo=Interval.from_dict(data.get("intervalo")),
            total_recuperado=data.get("total_recuperado"),
            **kwargs,
        )


@dataclass
class Stimulation:
    id: str
    date: str | None = None
    interval: Interval | None = None
    detail: str | None = None

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "interval": _interval_dict(self.interval),
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data["id"],
            date=data.get("date"),
            interval=Interval.from_dict(data.get("interval")),
            detail=data.get("detail"),
        )


@dataclass
class RejectedItem:
    """Extraction item the fold could not use, kept for auditing."""
    kind: str
    reason: str
    raw: dict = field(default_factory=dict)

    def to_dict(self):
        return {"kind": self.kind, "reason": self.reason, "raw": dict(self.raw)}

    @classmethod
    def from_dict(cls, data):
        return cls(kind=data["kind"], reason=data["reason"], raw=dict(data.get("raw") or {}))


@dataclass
class WellState:
    """Completion status of one wellbore after a sequence of interventions."""
    well: dict = field(default_factory=dict)
    zones: dict = field(default_factory=dict)
    perforations: list = field(default_factory=list)
    cement_plugs: list = field(default_factory=list)
    squeezes: list = field(default_factory=list)
    bpps: list = field(default_factory=list)
    tests: list = field(default_factory=list)
    stimulations: list = field(default_factory=list)
    notes: list = field(default_factory=list)
    rejected: list = field(default_factory=list)
    last_updated: str | None = None
    version: int = STATE_VERSION

    def open_perforations(self) -> list:
        return [p for p in self.perforations if p.status == OPEN]

    def active_barriers(self) -> list:
        """Active cement plugs and bridge plugs."""
        return [c for c in self.cement_plugs if c.active] + [b for b in self.bpps if b.active]

    def to_dict(self):
        return {
            "well": dict(self.well),
            "zones": {name: z.to_dict() for name, z in self.zones.items()},
            "perforations": [p.to_dict() for p in self.perforations],
            "cement_plugs": [c.to_dict() for c in self.cement_plugs],
            "squeezes": [s.to_dict() for s in self.squeezes],
            "bpps": [b.to_dict() for b in self.bpps],
            "tests": [t.to_dict() for t in self.tests],
            "stimulations": [s.to_dict() for s in self.stimulations],
            "notes": list(self.notes),
            "rejected": [r.to_dict() for r in self.rejected],
            "last_updated": self.last_updated,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "WellState":
        if not data:
            return create_initial_well_state()
        return cls(
            well=dict(data.get("well") or {}),
            zones={name: Zone.from_dict(z) for name, z in (data.get("zones") or {}).items()},
            perforations=[Perforation.from_dict(p) for p in data.get("perforations", [])],
            cement_plugs=[CementPlug.from_dict(c) for c in data.get("cement_plugs", [])],
            squeezes=[Squeeze.from_dict(s) for s in data.get("squeezes", [])],
            bpps=[Bpp.from_dict(b) for b in data.get("bpps", [])],
            tests=[TestLog.from_dict(t) for t in data.get("tests", [])],
            stimulations=[Stimulation.from_dict(s) for s in data.get("stimulations", [])],
            notes=list(data.get("notes", [])),
            rejected=[RejectedItem.from_dict(r) for r in data.get("rejected", [])],
            last_updated=data.get("last_updated"),
            version=data.get("version", STATE_VERSION),
        )


def create_initial_well_state(**partial) -> WellState:
    """Empty aggregate at version 1 with no last_updated. Keyword arguments override fields."""
    return WellState(**partial)
