"""Health check endpoint - reports whether the planner is configured to serve."""

from http.server import BaseHTTPRequestHandler
import json
import os

from planner.utils.config import PlannerConfig
from planner.utils.errors import ConfigurationError

SERVICE_NAME = "relationship-planner"


def health_status() -> tuple[int, dict]:
    """
    Check the settings the planner needs before it can load any data.

    Returns the HTTP status (200 when every check passes, 503 otherwise)
    and the response body.
    """
    checks = {
        "supabase": bool(os.environ.get("SUPABASE_URL") and os.environ.get("SUPABASE_SERVICE_ROLE_KEY")),
    }

    try:
        PlannerConfig.week_start_day()
        checks["week_start"] = True
    except ConfigurationError:
        checks["week_start"] = False

    healthy = all(checks.values())
    body = {
        "status": "ok" if healthy else "degraded",
        "service": SERVICE_NAME,
        "checks": checks,
        "week_start": PlannerConfig.WEEK_START,
    }
    return (200 if healthy else 503), body


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        status_code, body = health_status()
        self.send_response(status_code)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        self.wfile.write(json.dumps(body).encode('utf-8'))

    def do_POST(self):
        """Handle POST request (same as GET for health check)."""
        self.do_GET()
