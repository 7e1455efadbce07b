"""
Environment Settings

Loads endpoints and credentials for the blob store, relational store and
tracker from environment variables (optionally from a .env file).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from ..errors import ConfigError

REQUIRED_VARIABLES = (
    "R2_ENDPOINT",
    "R2_BUCKET",
    "R2_PUBLIC_URL",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "AIRTABLE_PAT",
    "AIRTABLE_BASE_ID",
    "AIRTABLE_LURE_URL_TABLE_ID",
    "AIRTABLE_MAKER_TABLE_ID",
)


@dataclass(frozen=True)
class Settings:
    """Credentials and endpoints for the external services."""

    # Blob store (R2, S3-compatible)
    r2_endpoint: str
    r2_bucket: str
    r2_public_url: str
    r2_access_key_id: str
    r2_secret_access_key: str

    # Relational store (Supabase REST)
    supabase_url: str
    supabase_service_role_key: str

    # Tracker (Airtable)
    airtable_pat: str
    airtable_base_id: str
    airtable_url_table_id: str
    airtable_maker_table_id: str

    r2_region: str = "auto"
    airtable_api_base: str = "https://api.airtable.com/v0"
    deploy_hook_url: str = ""


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env_file: Optional path to a .env file (default: search from cwd)

    Returns:
        Populated Settings

    Raises:
        ConfigError: Listing every required variable that is missing
    """
    load_dotenv(env_file)

    missing = [name for name in REQUIRED_VARIABLES if not os.environ.get(name)]
    if missing:
        raise ConfigError(
            f"Missing required environment variable(s): {', '.join(missing)}"
        )

    env = os.environ
    return Settings(
        r2_endpoint=env["R2_ENDPOINT"],
        r2_bucket=env["R2_BUCKET"],
        r2_public_url=env["R2_PUBLIC_URL"].rstrip("/"),
        r2_access_key_id=env["R2_ACCESS_KEY_ID"],
        r2_secret_access_key=env["R2_SECRET_ACCESS_KEY"],
        supabase_url=env["SUPABASE_URL"].rstrip("/"),
        supabase_service_role_key=env["SUPABASE_SERVICE_ROLE_KEY"],
        airtable_pat=env["AIRTABLE_PAT"],
        airtable_base_id=env["AIRTABLE_BASE_ID"],
        airtable_url_table_id=env["AIRTABLE_LURE_URL_TABLE_ID"],
        airtable_maker_table_id=env["AIRTABLE_MAKER_TABLE_ID"],
        r2_region=env.get("R2_REGION") or "auto",
        airtable_api_base=(env.get("AIRTABLE_API_BASE") or "https://api.airtable.com/v0").rstrip("/"),
        deploy_hook_url=env.get("VERCEL_DEPLOY_HOOK", ""),
    )
