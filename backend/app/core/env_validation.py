"""
Runtime Environment Validation Module

Validates required environment variables at application startup.
If validation fails, the application refuses to start (hard fail).
"""

import os
import sys
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProductionSettings(BaseSettings):
    """
    Strict validation schema for production environment variables.

    All required fields MUST be present and valid, or the application will not start.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",  # Fail on unknown entries in .env
    )

    # ========================================================================
    # CRITICAL: Database Configuration
    # ========================================================================
    database_url: str  # REQUIRED: PostgreSQL connection string

    # ========================================================================
    # CRITICAL: Firebase Authentication
    # ========================================================================
    firebase_project_id: str  # REQUIRED: Firebase project ID
    google_application_credentials: Optional[str] = None  # Path to service account JSON

    # ========================================================================
    # CRITICAL: Proof Photo Storage
    # ========================================================================
    storage_provider: str  # REQUIRED: "gcs" or "s3"

    gcs_bucket_name: Optional[str] = None
    gcs_project_id: Optional[str] = None

    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = None
    s3_bucket_name: Optional[str] = None

    # ========================================================================
    # Application Configuration
    # ========================================================================
    app_name: str = "BinDay Operations"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"
    site_url: str = "http://localhost:3000"

    # ========================================================================
    # CRITICAL: CORS Configuration
    # ========================================================================
    allowed_origins: str  # REQUIRED: Comma-separated list of allowed origins

    # ========================================================================
    # Operations
    # ========================================================================
    operational_timezone: str = "Australia/Melbourne"
    dev_day_override: Optional[str] = None
    log_retention_weeks: int = 6

    # ========================================================================
    # Optional: External Integrations
    # ========================================================================
    property_request_url: Optional[str] = None
    google_maps_server_key: Optional[str] = None

    presign_ttl_seconds: int = 300
    max_upload_size_mb: int = 15


def validate_environment() -> ProductionSettings:
    """
    Validate all required environment variables at startup.

    Returns:
        ProductionSettings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """

    try:
        settings = ProductionSettings()

        # 1. CORS: wildcard is only allowed in debug mode
        if not settings.debug:
            origins = [o.strip() for o in settings.allowed_origins.split(",")]
            if "*" in origins:
                print(
                    "❌ FATAL: Wildcard CORS origin (*) detected in production mode.",
                    file=sys.stderr
                )
                print(
                    "   Set ALLOWED_ORIGINS to specific domains (comma-separated).",
                    file=sys.stderr
                )
                sys.exit(1)

        # 2. Storage Provider: provider-specific configuration
        if settings.storage_provider == "gcs":
            if not settings.gcs_bucket_name or not settings.gcs_project_id:
                print(
                    "❌ FATAL: GCS_BUCKET_NAME and GCS_PROJECT_ID required when STORAGE_PROVIDER=gcs",
                    file=sys.stderr
                )
                sys.exit(1)
        elif settings.storage_provider == "s3":
            if not settings.s3_bucket_name or not settings.aws_access_key_id or not settings.aws_secret_access_key:
                print(
                    "❌ FATAL: S3_BUCKET_NAME, AWS_ACCESS_KEY_ID, and AWS_SECRET_ACCESS_KEY required when STORAGE_PROVIDER=s3",
                    file=sys.stderr
                )
                sys.exit(1)
        else:
            print(
                f"❌ FATAL: Invalid STORAGE_PROVIDER '{settings.storage_provider}'. Must be 'gcs' or 's3'.",
                file=sys.stderr
            )
            sys.exit(1)

        # 3. Firebase: credentials path must exist (if provided)
        if settings.google_application_credentials:
            if not os.path.exists(settings.google_application_credentials):
                print(
                    f"❌ FATAL: Firebase credentials file not found: {settings.google_application_credentials}",
                    file=sys.stderr
                )
                sys.exit(1)

        # 4. Database URL: basic format validation
        if not settings.database_url.startswith("postgresql"):
            print(
                "❌ FATAL: DATABASE_URL must be a PostgreSQL connection string (postgresql:// or postgresql+asyncpg://)",
                file=sys.stderr
            )
            sys.exit(1)

        # 5. Operational timezone must be a known IANA zone
        try:
            ZoneInfo(settings.operational_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            print(
                f"❌ FATAL: Unknown OPERATIONAL_TIMEZONE '{settings.operational_timezone}'",
                file=sys.stderr
            )
            sys.exit(1)

        print("✅ Environment validation passed")
        print(f"   App: {settings.app_name}")
        print(f"   Debug: {settings.debug}")
        print(f"   Storage: {settings.storage_provider}")
        print(f"   Timezone: {settings.operational_timezone}")
        print(f"   CORS Origins: {settings.allowed_origins}")

        return settings

    except ValidationError as e:
        print("❌ FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            msg = error["msg"]
            print(f"   • {field}: {msg}", file=sys.stderr)

        print("\nThe application cannot start with invalid configuration.", file=sys.stderr)
        print("Please check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    except Exception as e:
        print(f"❌ FATAL: Unexpected error during environment validation: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    validate_environment()
    print("\n✅ All environment variables are valid!")
