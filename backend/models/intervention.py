"""
Intervention SQLAlchemy model.
"""
from .base import db

PENDING = "pending"
ANALYZED = "analyzed"
FAILED = "failed"


class Intervention(db.Model):
    """Intervention entity - one dated block of a report's well history and its extraction."""
    __tablename__ = "interventions"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    well_id = db.Column(db.Integer, db.ForeignKey("wells.id"), nullable=False, index=True)
    report_id = db.Column(db.Integer, db.ForeignKey("reports.id"), nullable=False, index=True)
    block_index = db.Column(db.Integer, nullable=False)
    fecha_texto = db.Column(db.String(64), nullable=True)
    fecha_iso = db.Column(db.String(32), nullable=True, index=True)
    text = db.Column(db.Text, nullable=False)
    # status: pending | analyzed | failed
    status = db.Column(db.String(16), default=PENDING, nullable=False, index=True)
    mode = db.Column(db.String(16), nullable=True)
    resumen = db.Column(db.Text, nullable=True)
    payload = db.Column(db.JSON, nullable=True)
    error = db.Column(db.Text, nullable=True)
    analyzed_at = db.Column(db.DateTime, nullable=True)

    @property
    def analyzed(self) -> bool:
        return self.status == ANALYZED

    def chronology_item(self):
        """Shape consumed by engine.chronology."""
        return {"index": self.id, "fecha_iso": self.fecha_iso, "fecha_texto": self.fecha_texto}

    def to_dict(self, include_text=True):
        """Serialize to dictionary."""
        data = {
            "id": self.id,
            "well_id": self.well_id,
            "report_id": self.report_id,
            "block_index": self.block_index,
            "fecha_texto": self.fecha_texto,
            "fecha_iso": self.fecha_iso,
            "status": self.status,
            "mode": self.mode,
            "resumen": self.resumen,
            "payload": self.payload,
            "error": self.error,
            "analyzed_at": self.analyzed_at.isoformat() if self.analyzed_at else None,
        }
        if include_text:
            data["text"] = self.text
        return data
