"""Export-Modul: Excel (openpyxl) für Hotels und Zimmertypen."""

from export.excel_export import ExcelExporter, build_spreadsheet

__all__ = ["ExcelExporter", "build_spreadsheet"]
