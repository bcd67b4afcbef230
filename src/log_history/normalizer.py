"""Flatten per-entity change histories into LogEntry records."""

import logging
from typing import Any, Iterable, Optional, Union

from log_history.exceptions import InputShapeError
from log_history.models.log_entry import EntityType, LogEntry
from log_history.models.raw import RawEntity

logger = logging.getLogger(__name__)

EntityLike = Union[RawEntity, dict[str, Any]]


def _as_raw(entity: EntityLike) -> RawEntity:
    if isinstance(entity, RawEntity):
        return entity
    if isinstance(entity, dict):
        return RawEntity(data=entity)
    return RawEntity()


def _text(value: Any) -> str:
    """Stringify an id/name value; None and empty become ''."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def resolve_entity_name(entity: RawEntity, id_field: str, name_field: str) -> str:
    """Name field, else id field, else empty string."""
    return _text(entity.data.get(name_field)) or _text(entity.data.get(id_field))


def flatten_logs(
    entities: Optional[Iterable[EntityLike]],
    entity_type: EntityType | str,
    id_field: str,
    name_field: str,
) -> list[LogEntry]:
    """
    Produce one LogEntry per change event, keeping entity order and per-entity history order.
    Entities without a changeHistory contribute nothing. A missing entity list raises
    InputShapeError since there is nothing to normalize.
    """
    if entities is None or isinstance(entities, (str, bytes, dict)):
        raise InputShapeError(f"Expected a sequence of {entity_type} entities, got {type(entities).__name__}")

    etype = EntityType(entity_type)
    logs: list[LogEntry] = []
    for item in entities:
        entity = _as_raw(item)
        history = entity.change_history
        if not history:
            continue
        entity_id = _text(entity.data.get(id_field))
        entity_name = resolve_entity_name(entity, id_field, name_field)
        for event in history:
            logs.append(
                LogEntry(
                    entity_type=etype,
                    entity_id=entity_id,
                    entity_name=entity_name,
                    field=event.field,
                    change_type=event.change_type,
                    old_value=event.old_value,
                    new_value=event.new_value,
                    changed_by=event.changed_by,
                    changed_at=event.changed_at,
                    extras=event.extras,
                )
            )
    logger.debug("Flattened %d %s log entries", len(logs), etype.value)
    return logs
