"""Configuration models for validation using Pydantic."""

from typing import Literal
from pydantic import BaseModel, Field, field_validator

PLACEHOLDER_TOKENS = {"ghp_your_token_here", "your_github_token_here"}


class CredentialsConfig(BaseModel):
    """API credentials loaded from environment variables."""
    
    github_token: str = Field(..., min_length=1, description="GitHub personal access token")
    
    @field_validator("github_token")
    @classmethod
    def validate_github_token(cls, v: str) -> str:
        """Reject template placeholders copied from .env.example."""
        v = v.strip()
        if not v or v in PLACEHOLDER_TOKENS:
            raise ValueError("GitHub token must be set in .env file or GITHUB_TOKEN")
        return v


class Config(BaseModel):
    """Application configuration."""
    
    credentials: CredentialsConfig
    log_level: str = Field(default="WARNING", description="Logging level")
    api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    fetch_strategy: Literal["search", "graphql"] = Field(
        default="search", description="Remote query mechanism"
    )
    per_page: int = Field(default=100, ge=1, le=100, description="Single-page result bound")
    selector_command: str = Field(default="fzf", description="Interactive line selector binary")
    preview_command: str = Field(
        default="bat --color=always --line-range :500 {1}",
        description="Preview pane command; {1} is the artifact path",
    )
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper
    
    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError("API URL must start with https:// or http://")
        return v.rstrip("/")
