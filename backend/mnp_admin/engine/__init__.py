"""Derivation engine - pure categorization, analytics and action gating"""
from .categorizer import categorize_requests, sort_by_submission
from .analytics import compute_analytics
from .permission_guard import PermissionGuard
from .action_tracker import ActionTracker

__all__ = [
    "categorize_requests",
    "sort_by_submission",
    "compute_analytics",
    "PermissionGuard",
    "ActionTracker",
]
