"""
API route definitions using Flask Blueprint.
"""
from flask import Blueprint
from controllers.intervention_controller import InterventionController
from controllers.report_controller import ReportController
from controllers.well_controller import WellController
from utils.response_wrapper import success_response

api = Blueprint("api", __name__, url_prefix="/api")


@api.route("/health", methods=["GET"])
def health():
    return success_response({"status": "ok"})


@api.route("/reports/upload", methods=["POST"])
def upload_report():
    return ReportController.upload()


@api.route("/reports/segment", methods=["POST"])
def segment_report():
    return ReportController.segment()


@api.route("/reports", methods=["GET"])
def list_reports():
    return ReportController.list_recent()


@api.route("/reports/<int:report_id>/download", methods=["GET"])
def download_report(report_id):
    return ReportController.download(report_id)


@api.route("/reports/<int:report_id>", methods=["DELETE"])
def delete_report_permanent(report_id):
    return ReportController.delete_permanent(report_id)


@api.route("/wells", methods=["GET"])
def list_wells():
    return WellController.list_wells()


@api.route("/wells/<int:well_id>", methods=["GET"])
def get_well(well_id):
    return WellController.get_well(well_id)


@api.route("/wells/<int:well_id>", methods=["DELETE"])
def delete_well(well_id):
    return WellController.delete_well(well_id)


@api.route("/wells/<int:well_id>/state", methods=["GET"])
def get_well_state(well_id):
    return WellController.get_state(well_id)


@api.route("/wells/<int:well_id>/state/rebuild", methods=["POST"])
def rebuild_well_state(well_id):
    return WellController.rebuild_state(well_id)


@api.route("/wells/<int:well_id>/timeline", methods=["GET"])
def get_well_timeline(well_id):
    return WellController.get_timeline(well_id)


@api.route("/wells/<int:well_id>/interventions", methods=["GET"])
def list_well_interventions(well_id):
    return WellController.get_interventions(well_id)


@api.route("/interventions/<int:intervention_id>", methods=["GET"])
def get_intervention(intervention_id):
    return InterventionController.get(intervention_id)


@api.route("/interventions/<int:intervention_id>/analyze", methods=["POST"])
def analyze_intervention(intervention_id):
    return InterventionController.analyze(intervention_id)
