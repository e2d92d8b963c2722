"""
Report upload controller.
"""
from flask import request

from controllers.events import emit_process
from dao.report_dao import ReportDAO
from services.document_service import DocumentService
from services.report_service import ReportService
from utils.response_wrapper import success_response, error_response, not_found_response
from utils.s3_utils import get_presigned_url


class ReportController:
    """Handles report upload requests."""

    @staticmethod
    def upload():
        """POST /api/reports/upload - upload .docx/.txt report(s). Form field well_name is optional."""
        files_list = request.files.getlist("file")
        if not files_list:
            return error_response("No file part in request", 400)
        well_name = request.form.get("well_name") or None
        results = []
        for file_obj in files_list:
            if not file_obj or not file_obj.filename:
                continue
            filename = file_obj.filename
            if not DocumentService.is_supported(filename):
                continue
            try:
                result = ReportService.upload_report(file_obj, filename, well_name=well_name, emit=emit_process)
                results.append(result)
            except Exception as e:
                print(f"[API] Upload error file={filename!r}: {e}")
                results.append({"error": str(e), "file_name": filename})
        if not results:
            return error_response("No valid reports to upload (.docx or .txt)", 400)
        return success_response(
            {"uploads": results, "count": len(results)},
            "Report(s) uploaded successfully",
            201,
        )

    @staticmethod
    def segment():
        """POST /api/reports/segment - split posted text into dated interventions."""
        body = request.get_json(silent=True) or {}
        text = body.get("text")
        if not isinstance(text, str) or not text.strip():
            return error_response("text required", 400)
        return success_response(ReportService.segment_text(text))

    @staticmethod
    def list_recent():
        """GET /api/reports - list recent reports. Query: limit."""
        try:
            limit = request.args.get("limit", 50, type=int)
            return success_response(ReportService.list_recent(limit=limit))
        except Exception as e:
            return error_response(str(e), 500)

    @staticmethod
    def download(report_id):
        """GET /api/reports/<id>/download - get presigned download URL for report."""
        try:
            report = ReportDAO.get_by_id(report_id)
            if not report:
                return not_found_response("Report")
            if not report.s3_url:
                return error_response("Report has no stored file", 404)
            download_url = get_presigned_url(report.s3_url)
            return success_response({"download_url": download_url, "file_name": report.file_name})
        except Exception as e:
            return error_response(str(e), 500)

    @staticmethod
    def delete_permanent(report_id):
        """DELETE /api/reports/<id> - remove report and its interventions, then refold the well."""
        try:
            result = ReportService.delete_report(report_id)
            if result is None:
                return not_found_response("Report")
            return success_response(result, "Report deleted permanently", 200)
        except Exception as e:
            return error_response(str(e), 500)
