"""
Intervention analysis controller.
"""
from flask import request

from controllers.events import emit_process
from dao.intervention_dao import InterventionDAO
from services.well_state_service import WellStateService
from utils.response_wrapper import success_response, error_response, not_found_response


class InterventionController:
    """Handles intervention requests."""

    @staticmethod
    def get(intervention_id):
        """GET /api/interventions/<id> - intervention with its text and payload."""
        intervention = InterventionDAO.get_by_id(intervention_id)
        if not intervention:
            return not_found_response("Intervention")
        return success_response(intervention.to_dict())

    @staticmethod
    def analyze(intervention_id):
        """POST /api/interventions/<id>/analyze - extract facts and refold the well. Body: {detail}."""
        body = request.get_json(silent=True) or {}
        detail = body.get("detail") or "auto"
        try:
            print(f"[API] POST /api/interventions/{intervention_id}/analyze requested")
            result = WellStateService.analyze_intervention(intervention_id, detail=detail, emit=emit_process)
            if result is None:
                return not_found_response("Intervention")
            print(f"[API] Analysis completed for intervention_id={intervention_id}")
            return success_response(result, "Intervention analyzed successfully", 200)
        except ValueError as e:
            print(f"[API] Analyze error (ValueError) intervention_id={intervention_id}: {e}")
            emit_process("process_log", {"intervention_id": intervention_id, "message": str(e), "step": "error"})
            return error_response(str(e), 400)
        except Exception as e:
            print(f"[API] Analyze error intervention_id={intervention_id}: {e}")
            emit_process("process_log", {"intervention_id": intervention_id, "message": str(e), "step": "error"})
            return error_response(str(e), 500)
