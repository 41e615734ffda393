"""Spreadsheet preview/export tool.

Load a spreadsheet (.xlsx, .xls, .csv, .ods), preview its sheets with a
case-insensitive text filter, and export the active sheet as JSON or CSV.
"""

__version__ = "0.1.0"
