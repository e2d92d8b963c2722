"""
Well controller.
"""
from flask import request

from services.timeline_service import TimelineService
from services.well_service import WellService
from services.well_state_service import WellStateService
from utils.response_wrapper import success_response, error_response, not_found_response


class WellController:
    """Handles well-related requests."""

    @staticmethod
    def list_wells():
        """GET /api/wells - list all wells."""
        try:
            wells = WellService.list_wells()
            return success_response(wells)
        except Exception as e:
            return error_response(str(e), 500)

    @staticmethod
    def get_well(well_id: int):
        """GET /api/wells/{id} - get well by ID."""
        well = WellService.get_well(well_id)
        if not well:
            return not_found_response("Well")
        return success_response(well)

    @staticmethod
    def delete_well(well_id: int):
        """DELETE /api/wells/{id} - delete well with its reports and interventions."""
        try:
            if WellService.delete_well(well_id):
                return success_response(None, "Well deleted", 200)
            return not_found_response("Well")
        except Exception as e:
            return error_response(str(e), 500)

    @staticmethod
    def get_state(well_id: int):
        """GET /api/wells/{id}/state - current well state."""
        state = WellStateService.get_state(well_id)
        if state is None:
            return not_found_response("Well")
        return success_response(state)

    @staticmethod
    def rebuild_state(well_id: int):
        """POST /api/wells/{id}/state/rebuild - refold the analyzed interventions."""
        try:
            state = WellStateService.rebuild_well_state(well_id)
            if state is None:
                return not_found_response("Well")
            return success_response(state, "Well state rebuilt", 200)
        except Exception as e:
            return error_response(str(e), 500)

    @staticmethod
    def get_timeline(well_id: int):
        """GET /api/wells/{id}/timeline - state summary after each analyzed intervention. Query: full=1."""
        full = request.args.get("full", "").lower() in ("1", "true", "yes")
        timeline = TimelineService.get_timeline(well_id, full=full)
        if timeline is None:
            return not_found_response("Well")
        return success_response(timeline)

    @staticmethod
    def get_interventions(well_id: int):
        """GET /api/wells/{id}/interventions - interventions in chronological order with gating."""
        chronology = WellStateService.get_chronology(well_id)
        if chronology is None:
            return not_found_response("Well")
        return success_response(chronology)
