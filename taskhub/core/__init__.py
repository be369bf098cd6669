# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Core infrastructure: config, logging, database, security, dependencies."""
