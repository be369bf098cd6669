# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""HTTP controllers, one APIRouter per area."""
