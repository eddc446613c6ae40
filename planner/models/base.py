"""Shared configuration for document-store records."""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from planner.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class StoreRecord(BaseModel):
    """Base for records read from the document store (camelCase keys)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


def empty_if_none(value: Any) -> Any:
    return "" if value is None else value


def completion_flag(value: Any) -> bool:
    """Any falsy completion flag (null included) reads as not completed."""
    return bool(value)


def validate_items(model_cls: type[StoreRecord], items: Any, kind: str) -> list:
    """
    Validate a list of nested records, skipping the ones that do not fit.

    ``None`` is read as an empty list. A single bad entry never invalidates
    its parent record.
    """
    if items is None:
        return []
    if not isinstance(items, (list, tuple)):
        logger.warning("Expected a list of records", record_kind=kind, value_type=type(items).__name__)
        return []

    valid = []
    for item in items:
        if isinstance(item, model_cls):
            valid.append(item)
            continue
        try:
            valid.append(model_cls.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "Skipping invalid record",
                record_kind=kind,
                error_count=e.error_count(),
            )
    return valid
