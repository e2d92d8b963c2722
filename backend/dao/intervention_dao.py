"""
Intervention Data Access Object - database operations for intervention blocks.
"""
from datetime import datetime
from models import Intervention, Report
from models.intervention import ANALYZED, FAILED, PENDING


class InterventionDAO:
    """Handles intervention database operations."""

    @staticmethod
    def bulk_create(report: Report, blocks: list) -> list:
        """Insert the segmented blocks of a report. blocks: [{index, fecha_texto, fecha_iso, text}]."""
        from models.base import db
        rows = [
            Intervention(
                well=report.well,
                report=report,
                block_index=b["index"],
                fecha_texto=b.get("fecha_texto"),
                fecha_iso=b.get("fecha_iso"),
                text=b["text"],
                status=PENDING,
            )
            for b in blocks
        ]
        db.session.add_all(rows)
        db.session.commit()
        return rows

    @staticmethod
    def get_by_id(intervention_id: int) -> Intervention | None:
        """Fetch intervention by ID."""
        from models.base import db
        return db.session.get(Intervention, intervention_id)

    @staticmethod
    def get_by_well_id(well_id: int) -> list:
        """All interventions of a well in insertion order."""
        return Intervention.query.filter_by(well_id=well_id).order_by(Intervention.id).all()

    @staticmethod
    def mark_analyzed(intervention: Intervention, *, payload: dict, resumen: str | None, mode: str) -> Intervention:
        """Commit a successful extraction."""
        intervention.status = ANALYZED
        intervention.payload = payload
        intervention.resumen = resumen
        intervention.mode = mode
        intervention.error = None
        intervention.analyzed_at = datetime.utcnow()
        from models.base import db
        db.session.commit()
        return intervention

    @staticmethod
    def mark_failed(intervention: Intervention, error: str) -> Intervention:
        """Record a failed extraction. A previously analyzed payload is kept for the fold."""
        if intervention.status != ANALYZED:
            intervention.status = FAILED
        intervention.error = error
        from models.base import db
        db.session.commit()
        return intervention
