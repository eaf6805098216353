"""
Compliance Dashboard Routes
===========================

API route handlers for the Compliance Dashboard Service.

Routes:
- regulations: Regulation listing, lookup, departments and law types
- dashboard: Aggregated statistics and amendment views
- notifications: In-app notification feed
- admin: Sync, monthly analysis, email tests and the email log
"""

from services.compliance_dashboard.routes import admin, dashboard, notifications, regulations


__all__ = ["admin", "dashboard", "notifications", "regulations"]
