"""Result export."""

from .csv_exporter import DIAGNOSTIC_HEADER, HEADER, export_csv, export_filename, write_export

__all__ = ["DIAGNOSTIC_HEADER", "HEADER", "export_csv", "export_filename", "write_export"]
