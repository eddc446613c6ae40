"""Test helper functions."""

from typing import Dict, Any


def create_vercel_request(
    method: str = "GET",
    path: str = "/api/planner/tasks",
    query: Dict[str, Any] = None,
    headers: Dict[str, str] = None
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    if headers is None:
        headers = {
            "accept": "application/json"
        }

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": "",
        "query": query or {}
    }
