from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

class GitHubUser(BaseModel):
    """
    Immutable domain model representing a GitHub user profile snapshot.
    Field names are ours; the wire names live in the anti-corruption layer.
    """
    # Enforces immutability: once created, fields cannot be modified.
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Numeric GitHub user ID")
    login: str = Field(..., description="Login name, used as the cache key")
    name: Optional[str] = Field(default=None, description="Display name, if set")
    avatar_url: str = Field(..., description="URL of the user's avatar image")
    followers_count: int = Field(..., ge=0, description="Number of followers")
    following_count: int = Field(..., ge=0, description="Number of accounts followed")
    created_at: datetime = Field(..., description="Account creation timestamp")
    public_repos: int = Field(..., ge=0, description="Number of public repositories")
    bio: Optional[str] = Field(default=None, description="Profile bio, if set")


class RepositoryRecord(BaseModel):
    """
    Immutable domain model representing one repository owned by a user.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Numeric GitHub repository ID")
    name: str = Field(..., description="Name of the repository")
    full_name: str = Field(..., description="owner/name")
    description: Optional[str] = Field(default=None, description="Repository description")
    html_url: str = Field(..., description="Web URL of the repository")
    language: Optional[str] = Field(default=None, description="Primary language")
    stars: int = Field(..., ge=0, description="Total number of stargazers")
    fork: bool = Field(..., description="Whether the repository is a fork")
