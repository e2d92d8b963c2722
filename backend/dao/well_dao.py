"""
Well Data Access Object - database operations for wells.
"""
from datetime import datetime
from models import Intervention, Report, Well


class WellDAO:
    """Handles well database operations."""

    @staticmethod
    def create(name: str) -> Well:
        """Insert a new well."""
        well = Well(name=name)
        from models.base import db
        db.session.add(well)
        db.session.commit()
        return well

    @staticmethod
    def get_by_id(well_id: int) -> Well | None:
        """Fetch well by ID."""
        from models.base import db
        return db.session.get(Well, well_id)

    @staticmethod
    def get_all() -> list:
        """Fetch all wells, ordered by created_at desc."""
        return Well.query.order_by(Well.created_at.desc()).all()

    @staticmethod
    def get_by_name(name: str) -> Well | None:
        """Fetch well by name."""
        return Well.query.filter_by(name=name).first()

    @staticmethod
    def get_or_create(name: str) -> Well:
        """Reports for the same well name accumulate on one well."""
        return WellDAO.get_by_name(name) or WellDAO.create(name)

    @staticmethod
    def save_state(well: Well, state: dict) -> Well:
        """Store a folded WellState snapshot on the well."""
        well.state = state
        well.total_depth = (state.get("well") or {}).get("total_depth", well.total_depth)
        well.state_updated_at = datetime.utcnow()
        from models.base import db
        db.session.commit()
        return well

    @staticmethod
    def delete_by_id(well_id: int) -> bool:
        """Delete a well by ID. Reports and interventions go with it."""
        from models.base import db
        well = db.session.get(Well, well_id)
        if not well:
            return False
        Intervention.query.filter_by(well_id=well_id).delete()
        Report.query.filter_by(well_id=well_id).delete()
        db.session.delete(well)
        db.session.commit()
        return True
