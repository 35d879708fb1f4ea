"""Configuration loader that reads from .env and validates with Pydantic."""

import os
import sys
from pathlib import Path
from typing import Optional
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from models.config_models import Config, CredentialsConfig
from utils.errors import AuthError


def load_config(env_path: Optional[Path] = None) -> Config:
    """
    Load and validate configuration from environment variables.
    
    Reads from a .env file (explicit path, or the nearest one above the
    working directory) and validates all settings using Pydantic models.
    This is the only place the process environment is read.
    
    Args:
        env_path: Optional explicit .env path
    
    Returns:
        Config: Validated configuration object
        
    Raises:
        AuthError: If GITHUB_TOKEN is missing or empty
        SystemExit: If any other setting is invalid
    """
    load_dotenv(dotenv_path=env_path or find_dotenv(usecwd=True))
    
    token = os.getenv("GITHUB_TOKEN", "").strip()
    if not token:
        raise AuthError("Missing GITHUB_TOKEN in environment variables")
    
    overrides = {
        "api_url": os.getenv("GITHUB_API_URL"),
        "fetch_strategy": os.getenv("PR_PICKER_STRATEGY"),
        "selector_command": os.getenv("PR_PICKER_SELECTOR"),
        "preview_command": os.getenv("PR_PICKER_PREVIEW"),
    }
    
    try:
        config = Config(
            credentials=CredentialsConfig(github_token=token),
            log_level=os.getenv("LOG_LEVEL", "WARNING"),
            **{key: value for key, value in overrides.items() if value},
        )
        
        return config
        
    except ValidationError as e:
        print("❌ Configuration validation failed:", file=sys.stderr)
        print("\nPlease check your .env file. Missing or invalid fields:", file=sys.stderr)
        
        for error in e.errors():
            field_path = " → ".join(str(x) for x in error["loc"])
            message = error["msg"]
            print(f"  • {field_path}: {message}", file=sys.stderr)
        
        sys.exit(1)
