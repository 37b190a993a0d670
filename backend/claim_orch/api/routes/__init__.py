"""
API routes package
"""
from claim_orch.api.routes import travelers

__all__ = [
    "travelers",
]
