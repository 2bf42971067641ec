from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

# Language name -> number of bytes, in the order GitHub returns them (largest first).
LanguageMap = Dict[str, int]


class RepositorySummary(BaseModel):
    """
    Bare repository data as returned by a listing or search call, before enrichment.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Numeric GitHub repository id")
    name: str = Field(..., description="Name of the repository")
    owner: str = Field(..., description="Login name of the repository owner")
    description: Optional[str] = Field(default=None, description="Repository description")
    url: str = Field(..., description="HTML URL of the repository")
    stars: int = Field(default=0, ge=0, description="Total number of stargazers")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class CommitSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    sha: str
    message: Optional[str] = None
    author: Optional[str] = None
    date: Optional[datetime] = None


class PullRequestSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""
    state: str = "open"


class UserEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    created_at: datetime


class SearchFilter(BaseModel):
    """
    Optional search criteria. Blank strings are treated as if the criterion was not given.
    """
    model_config = ConfigDict(frozen=True)

    repository_name: Optional[str] = None
    language: Optional[str] = None
    username: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any(
            value and value.strip()
            for value in (self.repository_name, self.language, self.username)
        )


class RepositoryRecord(BaseModel):
    """
    Immutable, fully enriched view of one repository.
    Serialized with camelCase keys (lastCommitDate, pullRequestCount, ...).
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., description="Numeric GitHub repository id")
    name: str = Field(..., description="Name of the repository")
    description: Optional[str] = Field(default=None, description="Repository description")
    url: str = Field(..., description="HTML URL of the repository")
    stars: int = Field(default=0, ge=0, description="Total number of stargazers")
    languages: str = Field(default="", description="Comma-separated list of languages")
    last_commit_date: Optional[datetime] = Field(default=None, description="UTC date of the latest commit")
    last_commit_message: Optional[str] = None
    last_commit_author: Optional[str] = None
    pull_request_count: int = Field(default=0, ge=0, description="Number of open pull requests")
