"""
Depth interval primitives.
Intervals are closed ranges measured along the wellbore, always stored in meters.
"""
from dataclasses import dataclass

from .coerce import to_num, first_of

DEPTH_UNIT = "m"
METER_TOKENS = {"m", "mt", "mts", "metro", "metros", "meter", "meters", "metre", "metres"}


@dataclass
class Interval:
    """Closed depth range [desde, hasta]."""
    desde: float
    hasta: float
    unidad: str = DEPTH_UNIT

    def to_dict(self):
        return {"desde": self.desde, "hasta": self.hasta, "unidad": self.unidad}

    @classmethod
    def from_dict(cls, data: dict | None) -> "Interval | None":
        if not data:
            return None
        return cls(desde=data["desde"], hasta=data["hasta"], unidad=data.get("unidad", DEPTH_UNIT))


def is_meter_unit(unit) -> bool:
    """True when the declared unit is absent or a meter spelling."""
    if unit is None:
        return True
    if not isinstance(unit, str):
        return False
    return unit.strip().lower().rstrip(".") in METER_TOKENS | {""}


def to_interval(raw, *, strict_units: bool = False) -> Interval | None:
    """
    Build an Interval from a loosely typed {desde, hasta, unidad} holder.
    Returns None when either bound is missing or non-numeric. The unit is
    forced to meters; with strict_units a declared non-meter unit makes the
    interval unusable instead.
    """
    if raw is None:
        return None
    desde = to_num(first_of(raw, "desde"))
    hasta = to_num(first_of(raw, "hasta"))
    if desde is None or hasta is None:
        return None
    if strict_units and not is_meter_unit(first_of(raw, "unidad")):
        return None
    if desde > hasta:
        desde, hasta = hasta, desde
    return Interval(desde=desde, hasta=hasta, unidad=DEPTH_UNIT)


def intersects(a: Interval, b: Interval, tolerance: float = 0.0) -> bool:
    """Closed-interval overlap; touching endpoints intersect at zero tolerance."""
    return not (a.hasta < b.desde - tolerance) and not (b.hasta < a.desde - tolerance)
