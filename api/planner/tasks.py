"""Planner tasks endpoint - unified tasks, filtered and sorted, with statistics."""

import json
import asyncio
from pydantic import ValidationError
from planner.models.unified_task import SortOptions
from planner.services.planner_data import PlannerData
from planner.services.task_query import parse_filters
from planner.utils.logging import correlation_context, get_structured_logger
from planner.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)


def _response(status_code: int, body: dict) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body)
    }


async def load_planner(query_params: dict) -> dict:
    """Refresh planner data and apply the requested filters and sort order."""
    filters = parse_filters(query_params)
    sort_options = SortOptions.model_validate({
        "field": query_params.get("sortField") or "dueDate",
        "direction": query_params.get("sortDirection") or "asc",
    })

    planner = PlannerData()
    planner.filters = filters
    planner.sort_options = sort_options
    tasks = await planner.refresh()

    return {
        "tasks": [task.model_dump(mode="json", by_alias=True) for task in tasks],
        "stats": planner.stats().model_dump(mode="json"),
        "error": planner.error,
    }


def handler(request):
    """
    Return the planner task list.

    Query params: status, priority, type, parentType, assignedTo, sortField,
    sortDirection.
    """
    with correlation_context():
        try:
            query_params = request.get("query", {}) or {}

            try:
                loop = asyncio.get_event_loop()
            except RuntimeError:
                loop = None
            if loop is None or loop.is_closed():
                loop = asyncio.new_event_loop()
                asyncio.set_event_loop(loop)

            body = loop.run_until_complete(load_planner(query_params))
            logger.info("Planner tasks served", task_count=len(body["tasks"]))
            return _response(200, body)

        except ValidationError as e:
            logger.warning("Invalid planner query", error_count=e.error_count())
            return _response(400, {
                "error": "Invalid query parameters",
                "details": [error["msg"] for error in e.errors()]
            })

        except Exception as e:
            logger.error(f"Error loading planner tasks: {e}", exc_info=True)
            return _response(500, {"error": str(e)})
