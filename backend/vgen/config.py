# vgen/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "VGen Tools API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # CORS origins for frontend
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    # JWT
    jwt_secret: str | None = os.getenv("JWT_SECRET")
    jwt_expire: str = os.getenv("JWT_EXPIRE", "7d")  # 7d / 12h / 30m / 3600

    # Google Gemini (generateContent REST endpoint)
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_api_base: str = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    gemini_max_tokens: int = int(os.getenv("GEMINI_MAX_TOKENS", "2000"))
    ai_timeout_seconds: float = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

    # Storage: "supabase" | "memory" | "auto"
    storage_backend: str = os.getenv("STORAGE_BACKEND", "auto").lower()
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_anon_key: str | None = os.getenv("SUPABASE_ANON_KEY")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    supabase_timeout_seconds: float = float(os.getenv("SUPABASE_TIMEOUT_SECONDS", "10"))

    # Auth route abuse protection (fixed window, keyed by client IP)
    auth_rate_limit_max: int = int(os.getenv("AUTH_RATE_LIMIT_MAX", "5"))
    auth_rate_limit_window_seconds: int = int(os.getenv("AUTH_RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))

    # App-wide request limit per client IP
    api_rate_limit_max: int = int(os.getenv("API_RATE_LIMIT_MAX", "100"))
    api_rate_limit_window_seconds: int = int(os.getenv("API_RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))

    # Only behind a reverse proxy: key client IPs on X-Forwarded-For
    trust_proxy: bool = _env_bool("TRUST_PROXY")

    # Secure cookie flag for the accessToken cookie
    cookie_secure: bool = _env_bool("COOKIE_SECURE")

    @property
    def supabase_key(self) -> str | None:
        """Service role key when present (bypasses RLS), anon key otherwise."""
        return self.supabase_service_role_key or self.supabase_anon_key

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def missing_required(self) -> list[str]:
        """
        Names of required environment variables that are not set.

        JWT_SECRET and GEMINI_API_KEY are always required; the Supabase URL and
        key become required when STORAGE_BACKEND is explicitly "supabase".
        """
        missing = []
        if not self.jwt_secret:
            missing.append("JWT_SECRET")
        if not self.gemini_api_key:
            missing.append("GEMINI_API_KEY")
        if self.storage_backend == "supabase":
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_key:
                missing.append("SUPABASE_ANON_KEY")
        return missing


settings = Settings()  # Instantiate configuration
