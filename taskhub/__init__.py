# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""TaskHub — role-based task management service."""
