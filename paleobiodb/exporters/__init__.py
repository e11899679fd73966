"""
Export modules for PBDB result tables.

This package provides exporters for various file formats:
- CSV (.csv) for universal compatibility
- Excel (.xlsx) with a styled header row
- GeoJSON (.geojson) for GIS applications
"""

from paleobiodb.exporters.excel import ExcelExporter
from paleobiodb.exporters.csv import CSVExporter
from paleobiodb.exporters.geojson import GeoJSONExporter

__all__ = ["ExcelExporter", "CSVExporter", "GeoJSONExporter", "get_exporter"]


def get_exporter(format_name: str):
    """
    Get the appropriate exporter for a format name.

    Args:
        format_name: Format name (excel, csv, geojson)

    Returns:
        Exporter class

    Raises:
        ValueError: If format is not supported
    """
    exporters = {
        "excel": ExcelExporter,
        "xlsx": ExcelExporter,
        "csv": CSVExporter,
        "geojson": GeoJSONExporter,
        "json": GeoJSONExporter,
    }

    format_lower = format_name.lower()
    if format_lower not in exporters:
        supported = ", ".join(sorted(set(exporters.keys())))
        raise ValueError(
            f"Unsupported format: {format_name}. Supported formats: {supported}"
        )

    return exporters[format_lower]
