"""
Well-state orchestration - gated analysis of interventions and refolding of the well state.

The well state is never patched in place: after every change to the analyzed
interventions of a well, the state is recomputed by folding their payloads in
chronological order from an empty state.
"""
import itertools

from config.config import config
from dao.intervention_dao import InterventionDAO
from dao.well_dao import WellDAO
from engine.applier import replay_with_snapshots
from engine.chronology import Chronology
from engine.normalizer import ExtractedInterventionPayload
from engine.well_state import create_initial_well_state
from services.extraction_service import extract_intervention


def _stable_ids(intervention_id: int):
    """Entity ids derived from the intervention, so refolds keep the same identities."""
    counter = itertools.count(1)
    return lambda: f"i{intervention_id}-{next(counter)}"


class WellStateService:
    """Well-state business logic."""

    @staticmethod
    def fold_options() -> dict:
        return {"tolerance": config.CLOSURE_TOLERANCE, "strict_units": config.STRICT_DEPTH_UNITS}

    @staticmethod
    def chronology_for(interventions: list) -> Chronology:
        return Chronology(
            [i.chronology_item() for i in interventions],
            analyzed=[i.id for i in interventions if i.analyzed],
        )

    @staticmethod
    def ordered_analyzed(well_id: int) -> list:
        """Analyzed interventions of a well in chronological order."""
        interventions = InterventionDAO.get_by_well_id(well_id)
        chrono = WellStateService.chronology_for(interventions)
        by_id = {i.id: i for i in interventions}
        return [by_id[idx] for idx in chrono.order if by_id[idx].analyzed]

    @staticmethod
    def replay(interventions: list) -> list:
        """State after each of the given (already ordered) interventions."""
        payloads = []
        for inter in interventions:
            payload = ExtractedInterventionPayload.from_dict(inter.payload)
            payload.fecha = payload.fecha or inter.fecha_iso or inter.fecha_texto
            payloads.append(payload)
        return replay_with_snapshots(
            payloads,
            id_factories=[_stable_ids(inter.id) for inter in interventions],
            **WellStateService.fold_options(),
        )

    @staticmethod
    def rebuild_well_state(well_id: int):
        """Refold all analyzed interventions and store the result. None if the well is missing."""
        well = WellDAO.get_by_id(well_id)
        if not well:
            return None
        snapshots = WellStateService.replay(WellStateService.ordered_analyzed(well_id))
        state = snapshots[-1] if snapshots else create_initial_well_state()
        if well.total_depth is not None:
            state.well.setdefault("total_depth", well.total_depth)
        WellDAO.save_state(well, state.to_dict())
        return state.to_dict()

    @staticmethod
    def get_state(well_id: int):
        """Stored state of a well, folding it first if it was never computed."""
        well = WellDAO.get_by_id(well_id)
        if not well:
            return None
        if well.state is None:
            return WellStateService.rebuild_well_state(well_id)
        return well.state

    @staticmethod
    def get_chronology(well_id: int):
        """Interventions of a well in chronological order with their gating flags."""
        well = WellDAO.get_by_id(well_id)
        if not well:
            return None
        interventions = InterventionDAO.get_by_well_id(well_id)
        chrono = WellStateService.chronology_for(interventions)
        by_id = {i.id: i for i in interventions}
        items = []
        for idx in chrono.order:
            data = by_id[idx].to_dict(include_text=False)
            data["position"] = chrono.position(idx)
            data["can_analyze"] = chrono.can_analyze(idx)
            items.append(data)
        return {"well": well.to_dict(), "chronology": chrono.to_dict(), "interventions": items}

    @staticmethod
    def analyze_intervention(intervention_id: int, detail: str = "auto", emit=None):
        """
        Run extraction for one intervention and refold the well state.
        Only the next intervention in chronological order may be analyzed;
        analyzed ones may be re-analyzed. On extraction failure the well
        state is left as it was. Returns None if the intervention does not exist.
        """
        def log(msg: str, **kwargs):
            print(f"[Analyze] {msg}")
            if emit:
                emit("process_log", {"intervention_id": intervention_id, "message": msg, **kwargs})

        intervention = InterventionDAO.get_by_id(intervention_id)
        if not intervention:
            return None

        chrono = WellStateService.chronology_for(InterventionDAO.get_by_well_id(intervention.well_id))
        if not intervention.analyzed and not chrono.can_analyze(intervention.id):
            raise ValueError(
                f"Intervention {intervention.id} is not next in chronological order "
                f"(next eligible: {chrono.next_index})"
            )

        log(f"Extracting block {intervention.block_index} ({len(intervention.text)} chars)", step="extract")
        try:
            payload, mode = extract_intervention(
                intervention.text,
                fecha_texto=intervention.fecha_texto,
                fecha_iso=intervention.fecha_iso,
                detail=detail,
            )
        except Exception as e:
            log(f"Extraction failed: {e}", step="error")
            InterventionDAO.mark_failed(intervention, str(e))
            raise

        log(
            f"Extracted {len(payload.punzados)} punzados, {len(payload.cementaciones)} cementaciones, "
            f"{len(payload.tests)} tests, {len(payload.estimulaciones)} estimulaciones",
            step="extracted",
        )
        InterventionDAO.mark_analyzed(intervention, payload=payload.to_dict(), resumen=payload.resumen, mode=mode)
        state = WellStateService.rebuild_well_state(intervention.well_id)
        log("Well state updated", step="done")
        return {"intervention": intervention.to_dict(), "state": state}
