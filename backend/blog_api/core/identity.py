# blog_api/core/identity.py
"""
The principal a request acts as.

An ``Identity`` is resolved once per request from the bearer token and then
passed explicitly into every policy / visibility call. ``None`` stands for an
anonymous caller.
"""
from dataclasses import dataclass

from blog_api.models.user import ROLE_ADMIN, ROLE_USER

WILDCARD = "*"
ABILITY_READ = "read"
ABILITY_WRITE = "write"


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str = ROLE_USER
    abilities: tuple[str, ...] = (WILDCARD,)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def has_ability(self, ability: str) -> bool:
        return WILDCARD in self.abilities or ability in self.abilities

    @classmethod
    def from_user(cls, user, abilities=(WILDCARD,)) -> "Identity":
        return cls(user_id=user.id, role=user.role, abilities=tuple(abilities))
