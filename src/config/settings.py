"""
Environment-specific configuration settings.

Defaults keep a local run fully offline: in-memory customer store, static
delivery-zone table, and no outbound Graph API calls until a token is set.
"""

from dataclasses import dataclass
import os


OFFER_CONFIRM = "offer_confirm"
FORCE_CHANGE = "force_change"


def _env_float(name: str, default: float) -> float:
    return float(os.environ.get(name, default))


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, default))


@dataclass
class Settings:
    """Application settings for the conversation webhook."""

    # Environment
    environment: str = "dev"

    # Customer state store (empty table name means in-memory)
    customers_table: str = ""

    # WhatsApp Cloud API
    whatsapp_phone_number_id: str = ""
    whatsapp_access_token: str = ""
    graph_api_version: str = "v20.0"
    webhook_verify_token: str = ""
    whatsapp_app_secret: str = ""
    transport_timeout_seconds: float = 10.0
    dispatch_pacing_seconds: float = 0.0

    # Geocoding
    google_maps_api_key: str = ""
    geocode_timeout_seconds: float = 3.0

    # Delivery radius around the kitchen
    service_origin_lat: float = 19.0760
    service_origin_lng: float = 72.8777
    delivery_radius_km: float = 5.0
    per_km_fee: int = 10
    radius_min_order: int = 200
    zone_catalog_db_url: str = ""

    # Conversation policy
    registration_bonus_points: int = 100
    unserviceable_policy: str = OFFER_CONFIRM

    # Cache Configuration
    cache_ttl_seconds: int = 300  # 5 minutes
    cache_max_size: int = 100

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        policy = os.environ.get("UNSERVICEABLE_POLICY", OFFER_CONFIRM).lower()
        if policy not in (OFFER_CONFIRM, FORCE_CHANGE):
            raise ValueError(f"Unknown UNSERVICEABLE_POLICY: {policy}")

        return cls(
            environment=os.environ.get("ENVIRONMENT", "dev"),
            customers_table=os.environ.get("CUSTOMERS_TABLE", ""),
            whatsapp_phone_number_id=os.environ.get("WHATSAPP_PHONE_NUMBER_ID", ""),
            whatsapp_access_token=os.environ.get("WHATSAPP_ACCESS_TOKEN", ""),
            graph_api_version=os.environ.get("GRAPH_API_VERSION", "v20.0"),
            webhook_verify_token=os.environ.get("WEBHOOK_VERIFY_TOKEN", ""),
            whatsapp_app_secret=os.environ.get("WHATSAPP_APP_SECRET", ""),
            transport_timeout_seconds=_env_float("TRANSPORT_TIMEOUT_SECONDS", 10.0),
            dispatch_pacing_seconds=_env_float("DISPATCH_PACING_SECONDS", 0.0),
            google_maps_api_key=os.environ.get("GOOGLE_MAPS_API_KEY", ""),
            geocode_timeout_seconds=_env_float("GEOCODE_TIMEOUT_SECONDS", 3.0),
            service_origin_lat=_env_float("SERVICE_ORIGIN_LAT", 19.0760),
            service_origin_lng=_env_float("SERVICE_ORIGIN_LNG", 72.8777),
            delivery_radius_km=_env_float("DELIVERY_RADIUS_KM", 5.0),
            per_km_fee=_env_int("PER_KM_FEE", 10),
            radius_min_order=_env_int("RADIUS_MIN_ORDER", 200),
            zone_catalog_db_url=os.environ.get("ZONE_CATALOG_DB_URL", ""),
            registration_bonus_points=_env_int("REGISTRATION_BONUS_POINTS", 100),
            unserviceable_policy=policy,
            cache_ttl_seconds=_env_int("CACHE_TTL_SECONDS", 300),
            cache_max_size=_env_int("CACHE_MAX_SIZE", 100),
        )
