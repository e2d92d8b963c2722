"""
Timeline service - well state after each analyzed intervention.
"""
from dao.well_dao import WellDAO
from services.well_state_service import WellStateService


def _snapshot_summary(state) -> dict:
    open_perfs = state.open_perforations()
    return {
        "open_perforations": [p.interval.to_dict() for p in open_perfs],
        "open_count": len(open_perfs),
        "closed_count": len(state.perforations) - len(open_perfs),
        "squeezes": len(state.squeezes),
        "cement_plugs": len([c for c in state.cement_plugs if c.active]),
        "bpps": [b.depth for b in state.bpps if b.active],
        "tests": len(state.tests),
        "stimulations": len(state.stimulations),
        "rejected": len(state.rejected),
    }


class TimelineService:
    """Replays the analyzed interventions of a well one at a time."""

    @staticmethod
    def get_timeline(well_id: int, full: bool = False):
        """
        One entry per analyzed intervention, in chronological order.
        With full=True each entry carries the whole state snapshot.
        Returns None if the well does not exist.
        """
        well = WellDAO.get_by_id(well_id)
        if not well:
            return None
        interventions = WellStateService.ordered_analyzed(well_id)
        snapshots = WellStateService.replay(interventions)
        entries = []
        for inter, state in zip(interventions, snapshots):
            entry = {
                "intervention_id": inter.id,
                "fecha_texto": inter.fecha_texto,
                "fecha_iso": inter.fecha_iso,
                "resumen": inter.resumen,
                "summary": _snapshot_summary(state),
            }
            if full:
                entry["state"] = state.to_dict()
            entries.append(entry)
        return {"well": well.to_dict(), "timeline": entries}
