"""Services module.

This module provides the service layer architecture:
- exceptions: Custom service exceptions
- transactions: Commit/rollback scope for writing service methods
- sequences: Daily medical record / registration number issuance
- patients: Patient record management
- registrations: Visit registration management
- stats_service: Dashboard aggregates
"""
