# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Document models stored in MongoDB."""
