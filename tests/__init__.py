"""
ComplianceGuard Test Suite
==========================

Test organization:
- tests/unit/                              - Models and settings
- tests/services/compliance_dashboard/     - Loader, aggregation, notifications and API

Run tests:
    pytest                                  # All tests
    pytest tests/unit                       # Unit tests only
    pytest tests/services -k transports     # One area
"""
