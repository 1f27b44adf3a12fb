"""Dependency injection for FastAPI endpoints"""

from fastapi import Header, Request
from wip_gateway.infrastructure.clients.alerts import AlertClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: str = Header(..., min_length=1)) -> str:
    """Acting user, as authenticated upstream and forwarded in X-User-ID"""
    return x_user_id


def get_alert_client() -> AlertClient:
    """Provide status alert webhook client instance"""
    return AlertClient()
