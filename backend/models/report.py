"""
Report SQLAlchemy model.
"""
from datetime import datetime
from .base import db


class Report(db.Model):
    """Report entity - uploaded intervention report (Word/text) and its S3 reference."""
    __tablename__ = "reports"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    well_id = db.Column(db.Integer, db.ForeignKey("wells.id"), nullable=False, index=True)
    s3_url = db.Column(db.String(512), nullable=True)
    file_name = db.Column(db.String(255), nullable=False)
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow)
    text_length = db.Column(db.Integer, default=0, nullable=False)

    interventions = db.relationship("Intervention", backref="report", lazy="dynamic", cascade="all, delete-orphan")

    def to_dict(self):
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "well_id": self.well_id,
            "s3_url": self.s3_url,
            "file_name": self.file_name,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None,
            "text_length": self.text_length,
            "interventions_count": self.interventions.count(),
        }
