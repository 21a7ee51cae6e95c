from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthContext:
    """
    Identity of whoever is driving a payment operation.

    Built once at the view boundary from ``request.user`` and handed to the
    services explicitly. The system context is used for gateway webhooks,
    which arrive without a user session.
    """

    user_id: Optional[int]
    is_staff: bool = False
    is_system: bool = False

    @classmethod
    def from_user(cls, user) -> "AuthContext":
        if user is None or not user.is_authenticated:
            return cls(user_id=None)
        return cls(user_id=user.pk, is_staff=bool(user.is_staff))

    @classmethod
    def system(cls) -> "AuthContext":
        return cls(user_id=None, is_system=True)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def can_act_for(self, owner_id: int) -> bool:
        return self.is_system or self.is_staff or self.user_id == owner_id
