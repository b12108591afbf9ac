"""Operator workflows built on the API client and the data store."""

from .alert_triage import AlertTriage, InvalidTransition, alert_source, available_actions
from .analytics import Analytics, AnalyticsReport, build_report
from .auth import AdminSession, LoginResult
from .citizens import CitizensOverview
from .complaint_triage import ComplaintBucket, ComplaintTriage, classify_status
from .criminal_browser import CriminalBrowser, CriminalFilters
from .debounce import Debouncer
from .duplicate_guard import DuplicateCheck, DuplicateGuard, DuplicateStatus, is_duplicate
from .enrollment import BulkEnrollment, EnrollmentForm, EnrollmentWorkflow
from .match_search import MatchParameters, MatchSearch
from .notifications import Notification, Notifier, Variant

__all__ = [
    "AdminSession",
    "AlertTriage",
    "Analytics",
    "AnalyticsReport",
    "BulkEnrollment",
    "CitizensOverview",
    "ComplaintBucket",
    "ComplaintTriage",
    "CriminalBrowser",
    "CriminalFilters",
    "Debouncer",
    "DuplicateCheck",
    "DuplicateGuard",
    "DuplicateStatus",
    "EnrollmentForm",
    "EnrollmentWorkflow",
    "InvalidTransition",
    "LoginResult",
    "MatchParameters",
    "MatchSearch",
    "Notification",
    "Notifier",
    "Variant",
    "alert_source",
    "available_actions",
    "build_report",
    "classify_status",
    "is_duplicate",
]
