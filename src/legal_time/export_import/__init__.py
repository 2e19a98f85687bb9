"""Export and import functionality for Legal Time Tracker."""

from legal_time.export_import.base import Exporter, Importer
from legal_time.export_import.csv_format import CSVExporter
from legal_time.export_import.excel_format import ExcelExporter
from legal_time.export_import.json_format import JSONExporter, JSONImporter

__all__ = [
    "Exporter",
    "Importer",
    "CSVExporter",
    "ExcelExporter",
    "JSONExporter",
    "JSONImporter",
]
