"""
Intervention applier: the fold that turns extraction payloads into well state.

apply_intervention(prev, payload) never mutates prev. It deep-copies it, applies
the payload in a fixed order (perforations, cementing, tests, stimulations) and
returns the new state. Unusable items are dropped and recorded in
state.rejected; the fold itself never raises.
"""
import copy
import uuid
from datetime import datetime, timezone

from .geometry import to_interval, intersects
from .normalizer import ExtractedInterventionPayload, normalize_payload
from .well_state import (
    WellState,
    Zone,
    Perforation,
    CementPlug,
    Squeeze,
    Bpp,
    TestLog,
    Stimulation,
    RejectedItem,
    OPEN,
    CLOSED,
    CLOSED_BY_SQUEEZE,
    CLOSED_BY_CEMENT_PLUG,
    create_initial_well_state,
)


def new_id() -> str:
    return uuid.uuid4().hex[:8]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def close_perforations(state: WellState, interval, reason: str, tolerance: float = 0.0) -> list:
    """
    Close every perforation that intersects interval. The whole segment is
    closed on any overlap; closed ones just get the new reason.
    Returns the ids touched.
    """
    touched = []
    for p in state.perforations:
        if intersects(p.interval, interval, tolerance):
            p.status = CLOSED
            p.closed_by = reason
            touched.append(p.id)
    return touched


def register_zone(state: WellState, name, interval) -> None:
    if not name:
        return
    zone = state.zones.setdefault(name, Zone(name=name))
    if interval not in zone.intervals:
        zone.intervals.append(interval)


def _reject(state, kind, reason, item):
    state.rejected.append(RejectedItem(kind=kind, reason=reason, raw=item.to_dict()))


def apply_intervention(
    prev: WellState,
    payload,
    *,
    id_factory=None,
    now=None,
    tolerance: float = 0.0,
    strict_units: bool = False,
) -> WellState:
    """
    Fold one intervention into the well state.

    payload may be an ExtractedInterventionPayload or a raw dict (normalized here).
    id_factory and now are injectable for deterministic replays.
    """
    if not isinstance(payload, ExtractedInterventionPayload):
        payload = normalize_payload(payload)
    make_id = id_factory or new_id
    clock = now or utc_now_iso

    state = copy.deepcopy(prev)
    last_date = payload.fecha or prev.last_updated or None

    # 0) items already dropped by normalization or the extraction fallbacks
    state.rejected.extend(copy.deepcopy(payload.rejected))

    # 1) perforations open new segments
    for item in payload.punzados:
        iv = to_interval(item, strict_units=strict_units)
        if iv is None:
            _reject(state, "punzado", "missing interval", item)
            continue
        state.perforations.append(Perforation(id=make_id(), interval=iv, status=OPEN, zone=None, metadata={}))

    # 2) cementing, squeezes and bridge plugs, in payload order
    for item in payload.cementaciones:
        if item.tipo == "bpp":
            if item.profundidad is None:
                _reject(state, "bpp", "missing depth", item)
                continue
            state.bpps.append(
                Bpp(
                    id=make_id(),
                    depth=float(item.profundidad),
                    active=True,
                    zone=item.zona,
                    placed_at=last_date or clock(),
                )
            )
            continue

        iv = to_interval(item.intervalo, strict_units=strict_units)
        if iv is None:
            _reject(state, item.tipo, "missing interval", item)
            continue
        register_zone(state, item.zona, iv)

        if item.tipo == "squeeze":
            state.squeezes.append(Squeeze(id=make_id(), interval=iv, date=last_date or clock()))
            close_perforations(state, iv, CLOSED_BY_SQUEEZE, tolerance)
        else:
            # cementacion / tampon_cemento
            state.cement_plugs.append(CementPlug(id=make_id(), interval=iv, active=True, placed_at=last_date or clock()))
            close_perforations(state, iv, CLOSED_BY_CEMENT_PLUG, tolerance)

    # 3) tests are a log; without an interval they cannot be anchored
    for item in payload.tests:
        iv = to_interval(item.intervalo, strict_units=strict_units)
        if iv is None:
            _reject(state, "test", "missing interval", item)
            continue
        state.tests.append(
            TestLog(
                id=make_id(),
                intervalo=iv,
                nombre=item.nombre,
                numero=item.numero,
                fecha=item.fecha,
                fluido_recuperado=item.fluido_recuperado,
                fluido_clasificacion=item.fluido_clasificacion,
                total_recuperado=item.total_recuperado.to_dict() if item.total_recuperado else None,
                recuperado_texto=item.recuperado_texto,
                vazao=item.vazao,
                swab=item.swab,
                nivel_fluido=item.nivel_fluido,
                salinidad=item.salinidad,
                bsw=item.bsw,
                grados_api=item.grados_api,
                sopro=item.sopro,
                presion=item.presion,
                observacion=item.observacion,
            )
        )

    # 4) stimulations are kept even without an interval
    for item in payload.estimulaciones:
        state.stimulations.append(
            Stimulation(
                id=make_id(),
                date=item.fecha or last_date,
                interval=to_interval(item.intervalo, strict_units=strict_units),
                detail=item.tipo,
            )
        )

    state.last_updated = last_date or clock()
    return state


def fold_interventions(payloads, initial: WellState | None = None, **kwargs) -> WellState:
    """Fold payloads in the order given. Callers sort them chronologically first."""
    state = initial if initial is not None else create_initial_well_state()
    for payload in payloads:
        state = apply_intervention(state, payload, **kwargs)
    return state


def replay_with_snapshots(payloads, initial: WellState | None = None, id_factories=None, **kwargs) -> list:
    """
    Like fold_interventions but returns the state after every step.
    id_factories, when given, holds one id factory per payload (stable ids per intervention).
    """
    state = initial if initial is not None else create_initial_well_state()
    snapshots = []
    payloads = list(payloads)
    shared = kwargs.pop("id_factory", None)
    factories = list(id_factories) if id_factories is not None else [shared] * len(payloads)
    for payload, make_id in zip(payloads, factories):
        state = apply_intervention(state, payload, id_factory=make_id, **kwargs)
        snapshots.append(state)
    return snapshots
