"""Inbound webhook payload schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CommitAuthor(BaseModel):
    """Author block of a pushed commit."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    email: Optional[str] = None
    username: Optional[str] = None


class PushCommit(BaseModel):
    """One commit of a GitHub push event."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    message: str = ""
    url: Optional[str] = None
    author: CommitAuthor = Field(default_factory=CommitAuthor)
    added: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)


class PushEvent(BaseModel):
    """The parts of a GitHub push payload that are used."""

    model_config = ConfigDict(extra="ignore")

    ref: Optional[str] = None
    commits: list[PushCommit] = Field(default_factory=list)


class PushResult(BaseModel):
    """Outcome of processing a push."""

    message: str
    changes_created: int


class InteractionData(BaseModel):
    """Component data of a Discord interaction."""

    model_config = ConfigDict(extra="ignore")

    custom_id: Optional[str] = None


class Interaction(BaseModel):
    """Discord interaction callback body."""

    model_config = ConfigDict(extra="ignore")

    type: int
    data: Optional[InteractionData] = None
    member: Optional[dict[str, Any]] = None
    user: Optional[dict[str, Any]] = None

    @property
    def actor_id(self) -> Optional[str]:
        """Id of the Discord user who clicked (guild member or DM user)."""
        source = (self.member or {}).get("user") or self.user or {}
        return source.get("id")
