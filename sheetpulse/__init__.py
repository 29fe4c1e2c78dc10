"""SheetPulse: project-status dashboards from a hosted spreadsheet feed."""

__version__ = "0.3.0"
