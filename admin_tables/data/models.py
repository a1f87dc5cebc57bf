"""Entity shapes served by the admin backend."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Account:
    id: str
    first: str
    last: str
    photo: Optional[str] = None
    role_id: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first} {self.last}"

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Account":
        return cls(
            id=str(payload["id"]),
            first=payload.get("first", ""),
            last=payload.get("last", ""),
            photo=payload.get("photo"),
            role_id=None if payload.get("roleId") is None else str(payload["roleId"]),
            created_at=payload.get("createdAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first": self.first,
            "last": self.last,
            "photo": self.photo,
            "roleId": self.role_id,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class Role:
    id: str
    name: str
    description: Optional[str] = None
    is_default: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Role":
        return cls(
            id=str(payload["id"]),
            name=payload.get("name", ""),
            description=payload.get("description"),
            is_default=bool(payload.get("isDefault", False)),
            created_at=payload.get("createdAt"),
            updated_at=payload.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "isDefault": self.is_default,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class PagedData(Generic[T]):
    """One page of a collection and the total number of pages."""

    data: List[T] = field(default_factory=list)
    pages: int = 1

    @classmethod
    def from_dict(
        cls, payload: Dict[str, Any], parse: Callable[[Dict[str, Any]], T]
    ) -> "PagedData[T]":
        return cls(
            data=[parse(item) for item in payload.get("data", [])],
            pages=int(payload.get("pages", 1)),
        )
