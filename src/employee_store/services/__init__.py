"""
employee_store.services

Service layer: transactional gateways and the transactional demo service.

Responsibilities:
- Own transaction boundaries; repositories below never commit.
"""

# Package marker.
