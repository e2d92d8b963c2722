"""
Well business logic service.
"""
from dao.well_dao import WellDAO
from dao.report_dao import ReportDAO
from utils.s3_utils import delete_report_object


class WellService:
    """Well-related business logic."""

    @staticmethod
    def list_wells():
        """Get all wells."""
        wells = WellDAO.get_all()
        return [w.to_dict() for w in wells]

    @staticmethod
    def get_well(well_id: int):
        """Get well by ID, with its reports."""
        well = WellDAO.get_by_id(well_id)
        if not well:
            return None
        data = well.to_dict()
        data["reports"] = [r.to_dict() for r in ReportDAO.get_by_well_id(well_id)]
        return data

    @staticmethod
    def delete_well(well_id: int) -> bool:
        """Delete a well, its stored reports and interventions."""
        for report in ReportDAO.get_by_well_id(well_id):
            if report.s3_url:
                delete_report_object(report.s3_url)
        return WellDAO.delete_by_id(well_id)
