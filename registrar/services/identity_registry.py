"""
Identity and role registry: one fixed administrator, a mutable teacher set.
"""

import logging
from typing import Any, Dict, Set, Tuple

from ..core.entities import Identity
from ..core.enums import Role
from ..core.exceptions import AlreadyExists, NotFound
from ..core.guards import require_admin, require_identity

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """Answers authorization questions about caller identities."""

    def __init__(self, admin: Identity):
        require_identity(admin)
        self._admin = admin
        self._teachers: Set[Identity] = set()

    @property
    def admin(self) -> Identity:
        return self._admin

    def add_teacher(self, caller: Identity, identity: Identity) -> None:
        """Mark ``identity`` as a teacher. Admin only."""
        require_admin(caller, self._admin)
        require_identity(identity)
        if identity in self._teachers:
            raise AlreadyExists("Teacher already exists", details={'identity': identity})

        self._teachers.add(identity)
        logger.info("Teacher added: %s", identity)

    def remove_teacher(self, caller: Identity, identity: Identity) -> None:
        """Unmark ``identity``. Courses it already teaches keep it as teacher."""
        require_admin(caller, self._admin)
        if identity not in self._teachers:
            raise NotFound("Teacher not found", details={'identity': identity})

        self._teachers.discard(identity)
        logger.info("Teacher removed: %s", identity)

    def is_teacher(self, identity: Identity) -> bool:
        return identity in self._teachers

    def is_admin_or_teacher(self, identity: Identity) -> bool:
        return identity == self._admin or identity in self._teachers

    def role_of(self, identity: Identity) -> Role:
        if identity == self._admin:
            return Role.ADMIN
        if identity in self._teachers:
            return Role.TEACHER
        return Role.NONE

    def teachers(self) -> Tuple[Identity, ...]:
        return tuple(sorted(self._teachers))

    def export_state(self) -> Dict[str, Any]:
        return {'admin': self._admin, 'teachers': sorted(self._teachers)}

    def restore_state(self, state: Dict[str, Any]) -> None:
        self._admin = state['admin']
        self._teachers = set(state['teachers'])
