"""
Request Dependencies
====================

FastAPI dependency functions returning the components created by the
application factory. Every component is a process-wide singleton kept
on ``app.state``.

Version: 0.1.0
"""

from fastapi import Request

from services.compliance_dashboard.analysis import MonthlyAnalysis
from services.compliance_dashboard.loader import SpreadsheetLoader
from services.compliance_dashboard.notifications import (
    EmailLog,
    NotificationDispatcher,
    NotificationFeed,
)
from services.compliance_dashboard.queries import RegulationQueryService
from shared.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_loader(request: Request) -> SpreadsheetLoader:
    return request.app.state.loader


def get_query_service(request: Request) -> RegulationQueryService:
    return request.app.state.queries


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_email_log(request: Request) -> EmailLog:
    return request.app.state.email_log


def get_feed(request: Request) -> NotificationFeed:
    return request.app.state.feed


def get_analysis(request: Request) -> MonthlyAnalysis:
    return request.app.state.analysis
