"""Export/report service package."""

from .exporter import ExportResult, export_records, records_to_frame

__all__ = ["ExportResult", "export_records", "records_to_frame"]
