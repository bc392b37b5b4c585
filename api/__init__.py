"""
Airdrop HTTP API (FastAPI)

- POST /generate-merkle - Build a distribution from allocations
- POST /update-merkle - Publish a root to the ledger
- GET /claims/{address} - Claim status against the served distribution
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
