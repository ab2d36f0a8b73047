"""Jira wire models used by the verification engine."""

from dataclasses import dataclass
from typing import Any


@dataclass
class Comment:
    """A single issue comment."""

    id: str
    body: str
    author: str = ""
    author_email: str | None = None
    created: str | None = None
    updated: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Comment":
        author = data.get("author") or {}
        return cls(
            id=str(data.get("id", "")),
            body=data.get("body") or "",
            author=author.get("displayName", ""),
            author_email=author.get("emailAddress"),
            created=data.get("created"),
            updated=data.get("updated"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "body": self.body,
            "author": self.author,
            "created": self.created,
            "updated": self.updated,
        }


@dataclass
class Transition:
    """A workflow transition available on an issue."""

    id: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Transition":
        return cls(id=str(data.get("id", "")), name=data.get("name") or "")
