"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend credentials and enum-like options are
validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATABASE_BACKENDS = ("firestore", "memory")
AGGREGATION_STRATEGIES = ("recompute", "counter")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "udhyogunity"
    app_version: str = "1.0.0"
    debug: bool = False

    # Document store: "firestore" (REST API) or "memory" (process-local, dev/tests)
    database_backend: str = "firestore"
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None  # Path to JSON file
    firestore_timeout_seconds: float = 30.0

    # CORS
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Reviews
    review_page_size_default: int = 10
    review_page_size_max: int = 50
    # Historical aggregates include hidden/reported reviews; flip to exclude them.
    ratings_exclude_hidden_reviews: bool = False
    # "recompute" re-reads every review on each mutation; "counter" keeps atomic
    # sum/count documents under RatingCounters.
    ratings_aggregation_strategy: str = "recompute"

    # Dashboard: count each document path once across probes (new deployments only).
    dashboard_deduplicate: bool = False

    # Media uploads (Cloudinary unsigned preset)
    cloudinary_cloud_name: str = ""
    cloudinary_upload_preset: str = ""
    cloudinary_timeout_seconds: float = 60.0

    # Payments (Razorpay checkout signature verification)
    razorpay_key_secret: SecretStr | None = None

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backend_and_options(self) -> "Settings":
        """Validate backend credentials and option names.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - Memory: no credentials; data lives only for the process lifetime.
        """
        if self.database_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When database_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        elif self.database_backend not in DATABASE_BACKENDS:
            raise ValueError(
                f"database_backend must be one of {DATABASE_BACKENDS}, got: {self.database_backend!r}"
            )
        if self.ratings_aggregation_strategy not in AGGREGATION_STRATEGIES:
            raise ValueError(
                f"ratings_aggregation_strategy must be one of {AGGREGATION_STRATEGIES}, "
                f"got: {self.ratings_aggregation_strategy!r}"
            )
        if self.review_page_size_default < 1 or self.review_page_size_max < self.review_page_size_default:
            raise ValueError(
                "review_page_size_default must be >= 1 and <= review_page_size_max"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
