"""
Compliance Dashboard Service
============================

Tracks legal-regulation compliance per department from a spreadsheet.

Features:
- Spreadsheet loading with a five-minute in-memory cache
- Filtering and free-text search over regulation records
- Department progress aggregation by effective-date month
- Department status emails over Gmail SMTP, SendGrid or demo mode
- Append-only email delivery log
- Scheduled monthly analysis and effective-date reminders

Port: 3000
"""

__version__ = "0.1.0"
