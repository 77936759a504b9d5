import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./logitrack.db"
    )
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    # JWT Settings
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_lifetime_seconds: int = int(os.getenv("JWT_LIFETIME_SECONDS", "7200"))

    # Inventory list cache (absolute expiration)
    inventory_cache_ttl_seconds: float = float(os.getenv("INVENTORY_CACHE_TTL_SECONDS", "30"))

    manager_role: str = os.getenv("MANAGER_ROLE", "Manager")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
