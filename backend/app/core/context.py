from dataclasses import dataclass

from app.models.user import User, UserRole


@dataclass(frozen=True)
class ActorContext:
    """The resolved caller of a core operation."""

    user_id: str
    role: UserRole
    name: str = ""

    @classmethod
    def from_user(cls, user: User) -> "ActorContext":
        return cls(user_id=user.id, role=user.role, name=user.name)

    @property
    def is_hod(self) -> bool:
        return self.role == UserRole.hod
