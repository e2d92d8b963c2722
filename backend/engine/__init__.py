"""Well-state accumulation engine: pure data model, normalizer, fold and chronology."""
from .geometry import Interval, to_interval, intersects
from .well_state import WellState, create_initial_well_state
from .normalizer import ExtractedInterventionPayload, normalize_payload
from .applier import apply_intervention, fold_interventions, replay_with_snapshots
from .chronology import Chronology

__all__ = [
    "Interval",
    "to_interval",
    "intersects",
    "WellState",
    "create_initial_well_state",
    "ExtractedInterventionPayload",
    "normalize_payload",
    "apply_intervention",
    "fold_interventions",
    "replay_with_snapshots",
    "Chronology",
]
