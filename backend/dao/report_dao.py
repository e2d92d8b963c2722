"""
Report Data Access Object - database operations for uploaded reports.
"""
from models import Intervention, Report, Well
from utils.s3_utils import delete_report_object


class ReportDAO:
    """Handles report metadata database operations."""

    @staticmethod
    def create(well: Well, file_name: str, *, s3_url: str | None = None, text_length: int = 0) -> Report:
        """Insert report metadata."""
        report = Report(well=well, file_name=file_name, s3_url=s3_url, text_length=text_length)
        from models.base import db
        db.session.add(report)
        db.session.commit()
        return report

    @staticmethod
    def get_by_id(report_id: int) -> Report | None:
        """Fetch report by ID."""
        from models.base import db
        return db.session.get(Report, report_id)

    @staticmethod
    def get_by_well_id(well_id: int) -> list:
        """Fetch all reports for a well."""
        return Report.query.filter_by(well_id=well_id).order_by(Report.uploaded_at.desc()).all()

    @staticmethod
    def get_recent(limit: int = 50) -> list:
        """Fetch the most recently uploaded reports."""
        return Report.query.order_by(Report.uploaded_at.desc()).limit(limit).all()

    @staticmethod
    def delete_permanent(report_id: int) -> int | None:
        """
        Delete a report, its S3 object and its interventions.
        Returns the well id so the caller can refold, or None if not found.
        """
        from models.base import db

        report = db.session.get(Report, report_id)
        if not report:
            return None
        well_id = report.well_id
        if report.s3_url:
            delete_report_object(report.s3_url)
        Intervention.query.filter_by(report_id=report_id).delete()
        db.session.delete(report)
        db.session.commit()
        return well_id
