# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Socket.IO server and namespace."""
