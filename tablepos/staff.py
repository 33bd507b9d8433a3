"""Staff roster."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable
from uuid import uuid4

from tablepos.models import StaffMember, StaffRole

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "email", "role", "active"})


class StaffRoster:
    """Staff members in hiring order; updates swap in a new record."""

    def __init__(self, members: Iterable[StaffMember] = ()) -> None:
        self._members: tuple[StaffMember, ...] = tuple(members)

    def members(self) -> tuple[StaffMember, ...]:
        return self._members

    def get(self, staff_id: str) -> StaffMember | None:
        for member in self._members:
            if member.staff_id == staff_id:
                return member
        return None

    def add(self, name: str, email: str, role: StaffRole, active: bool = True) -> StaffMember:
        member = StaffMember(staff_id=uuid4().hex[:8], name=name.strip(), email=email.strip(), role=StaffRole(role), active=active)
        self._members = self._members + (member,)
        logger.info("staff=%s added as %s", member.staff_id, member.role.value)
        return member

    def update(self, staff_id: str, **changes: Any) -> StaffMember | None:
        """Overwrite fields of a member. Unknown ids are ignored."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot update {', '.join(sorted(unknown))}")
        current = self.get(staff_id)
        if current is None:
            logger.debug("update for unknown staff=%s", staff_id)
            return None
        if "role" in changes:
            changes["role"] = StaffRole(changes["role"])
        updated = replace(current, **changes)
        self._members = tuple(updated if m.staff_id == staff_id else m for m in self._members)
        return updated

    def deactivate(self, staff_id: str) -> StaffMember | None:
        return self.update(staff_id, active=False)

    def search(self, query: str) -> list[StaffMember]:
        q = query.strip().lower()
        if not q:
            return list(self._members)
        return [
            m
            for m in self._members
            if q in m.name.lower() or q in m.email.lower() or q in m.role.value
        ]

    def servers(self) -> list[StaffMember]:
        """Active waiters, the people a delivered line can be attributed to."""
        return [m for m in self._members if m.active and m.role is StaffRole.WAITER]
