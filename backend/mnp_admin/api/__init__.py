"""API module - Routes and dependencies"""
from .deps import get_services

__all__ = ["get_services"]
