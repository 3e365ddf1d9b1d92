"""
employee_store.api

HTTP surface (FastAPI).

Responsibilities:
- Expose the employee lookup contract (retrieve-by-id, retrieve-all, save, delete).
- Provide health/readiness probes.
"""

# Package marker.
