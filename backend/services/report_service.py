"""
Report upload and storage service.
"""
from io import BytesIO
from pathlib import Path

from dao.intervention_dao import InterventionDAO
from dao.report_dao import ReportDAO
from dao.well_dao import WellDAO
from services.document_service import DocumentService
from services.segmentation_service import segment_report_text
from services.well_state_service import WellStateService
from utils.s3_utils import upload_report_object


def well_name_from_file(file_name: str) -> str:
    """Fallback well name: the file stem, e.g. 'RJS-0123 historico.docx' -> 'RJS-0123 historico'."""
    stem = Path(file_name or "").stem.strip()
    return stem or "Unknown Well"


class ReportService:
    """Handles report upload, S3 storage, segmentation and persistence."""

    @staticmethod
    def segment_text(text: str):
        """Split report text into dated intervention blocks without storing anything."""
        blocks = segment_report_text(text or "")
        return {"blocks": blocks, "count": len(blocks)}

    @staticmethod
    def upload_report(file_obj, file_name: str, well_name: str | None = None, emit=None):
        """
        Store a report in S3, split its well history into interventions and persist them.
        Reports for the same well name accumulate on one well.
        If emit(event, data) is provided, progress is pushed to the frontend via WebSocket.
        """
        def log(msg: str, **kwargs):
            print(f"[Upload] {msg}")
            if emit:
                emit("process_log", {"file_name": file_name, "message": msg, **kwargs})

        if not DocumentService.is_supported(file_name):
            raise ValueError(f"Unsupported report format: {file_name}")

        file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, str):
            content = content.encode("utf-8")
        log(f"Reading {file_name} ({len(content)} bytes)", step="read")
        text = DocumentService.extract_text(content, file_name)

        blocks = segment_report_text(text)
        log(f"Found {len(blocks)} dated interventions", step="segment", total=len(blocks))
        if not blocks:
            raise ValueError("No dated interventions found in the report")

        well = WellDAO.get_or_create((well_name or "").strip() or well_name_from_file(file_name))
        log(f"Using well id={well.id} name={well.name!r}", step="well")

        s3_url = upload_report_object(BytesIO(content), well.id, file_name)
        log(f"Stored at {s3_url}", step="upload")

        report = ReportDAO.create(well, file_name, s3_url=s3_url, text_length=len(text))
        interventions = InterventionDAO.bulk_create(report, blocks)
        log("Done.", step="done", report_id=report.id, well_id=well.id)
        return {
            "well": well.to_dict(),
            "report": report.to_dict(),
            "interventions": [i.to_dict(include_text=False) for i in interventions],
        }

    @staticmethod
    def list_recent(limit: int = 50):
        data = []
        for r in ReportDAO.get_recent(limit=limit):
            item = r.to_dict()
            item["well_name"] = r.well.name if r.well else "Unknown"
            data.append(item)
        return data

    @staticmethod
    def delete_report(report_id: int):
        """
        Delete a report and its interventions, then refold the well from what is left.
        Returns the rebuilt state, or None if the report does not exist.
        """
        well_id = ReportDAO.delete_permanent(report_id)
        if well_id is None:
            return None
        print(f"[Report] Deleted report_id={report_id}, rebuilding well_id={well_id}")
        return {"well_id": well_id, "state": WellStateService.rebuild_well_state(well_id)}
