"""Wholesale replacement of boolean set-membership flags."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from chainview.services.consistency import inconsistent_state

logger = logging.getLogger(__name__)


@dataclass
class FlagDiff:
    added: list[Any] = field(default_factory=list)
    removed: list[Any] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def replace_flagged_set(
    db: Session,
    model: type[Any],
    flag: str,
    desired_ids: Iterable[str],
    scope: dict[str, Any] | None = None,
    updated_at: datetime | None = None,
) -> FlagDiff:
    """Make exactly ``desired_ids`` carry ``flag`` within ``scope``.

    Current members and desired non-members are loaded from the store, the
    additions and removals are computed in two passes and applied as two
    batches. A desired id missing from the store (or outside ``scope``) is a
    fatal inconsistency.
    """
    desired = list(dict.fromkeys(desired_ids))
    flag_column = getattr(model, flag)
    scoped = select(model).filter_by(**(scope or {}))

    current_members = list(db.scalars(scoped.where(flag_column.is_(True))))
    candidates = list(db.scalars(scoped.where(model.id.in_(desired)))) if desired else []

    found = {entity.id for entity in candidates}
    missing = [entity_id for entity_id in desired if entity_id not in found]
    if missing:
        inconsistent_state(
            f"{model.__name__} set references unknown entities",
            flag=flag,
            missing=missing,
            scope=scope or {},
        )

    desired_set = set(desired)
    to_remove = [entity for entity in current_members if entity.id not in desired_set]
    to_add = [entity for entity in candidates if not getattr(entity, flag)]

    diff = FlagDiff()
    for entity in to_remove:
        setattr(entity, flag, False)
        if updated_at is not None and hasattr(entity, "updated_at"):
            entity.updated_at = updated_at
        diff.removed.append(entity.id)

    for entity in to_add:
        setattr(entity, flag, True)
        if updated_at is not None and hasattr(entity, "updated_at"):
            entity.updated_at = updated_at
        diff.added.append(entity.id)

    logger.debug(
        "%s.%s: %d added, %d removed",
        model.__name__,
        flag,
        len(diff.added),
        len(diff.removed),
    )
    return diff
