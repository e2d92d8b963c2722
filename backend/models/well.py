"""
Well SQLAlchemy model.
"""
from datetime import datetime
from .base import db


class Well(db.Model):
    """Well entity - a wellbore and the latest snapshot of its folded state."""
    __tablename__ = "wells"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    total_depth = db.Column(db.Float, nullable=True)
    # WellState.to_dict() of the last fold over analyzed interventions
    state = db.Column(db.JSON, nullable=True)
    state_updated_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    reports = db.relationship("Report", backref="well", lazy="dynamic", cascade="all, delete-orphan")
    interventions = db.relationship("Intervention", backref="well", lazy="dynamic", cascade="all, delete-orphan")

    def to_dict(self):
        """Serialize to dictionary."""
        state = self.state or {}
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "total_depth": self.total_depth,
            "state_updated_at": self.state_updated_at.isoformat() if self.state_updated_at else None,
            "last_updated": state.get("last_updated"),
            "perforations_count": len(state.get("perforations", [])),
        }
