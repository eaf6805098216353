"""
ComplianceGuard Services
========================

Services:
- compliance_dashboard: regulation spreadsheet dashboard and department notifications
"""

__all__ = [
    "compliance_dashboard",
]
