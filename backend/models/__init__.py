"""Models package."""
from .base import db
from .well import Well
from .report import Report
from .intervention import Intervention

__all__ = ["db", "Well", "Report", "Intervention"]
