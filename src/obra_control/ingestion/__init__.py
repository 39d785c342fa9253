"""Spreadsheet ingestion: vocabulary tables, row parsers and the workbook reader."""
