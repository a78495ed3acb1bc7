from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Flight Booking Core'
    VERSION: str = '0.1.0'
    DEBUG: bool = False

    # State backend: "kvrocks" for shared deployments, "memory" for a single process
    STATE_BACKEND: Literal['kvrocks', 'memory'] = 'kvrocks'

    # Kvrocks Configuration (Redis protocol + Kvrocks storage)
    KVROCKS_HOST: str = 'localhost'
    KVROCKS_PORT: int = 6666
    KVROCKS_DB: int = 0
    KVROCKS_PASSWORD: str = ''
    KVROCKS_KEY_PREFIX: str = ''  # test isolation
    REDIS_DECODE_RESPONSES: bool = True

    # Kvrocks Connection Pool Configuration
    KVROCKS_POOL_MAX_CONNECTIONS: int = 100
    KVROCKS_POOL_SOCKET_TIMEOUT: int = 10  # seconds
    KVROCKS_POOL_SOCKET_CONNECT_TIMEOUT: int = 10  # seconds
    KVROCKS_POOL_SOCKET_KEEPALIVE: bool = True
    KVROCKS_POOL_HEALTH_CHECK_INTERVAL: int = 30  # seconds

    # Holds
    HOLD_DEFAULT_SECONDS: int = 300
    HOLD_MAX_SECONDS: int = 1800
    HOLD_MAX_SEATS: int = 9
    HOLD_SWEEP_INTERVAL_SECONDS: float = 30.0
    HOLD_SWEEP_LOCK_SECONDS: int = 5

    # Transient store errors only, never lock contention
    STORE_RETRY_ATTEMPTS: int = 3
    STORE_RETRY_BACKOFF_SECONDS: float = 0.05

    # Pricing
    PRICE_CACHE_TTL_SECONDS: int = 300

    # Booking rules
    CANCELLATION_CUTOFF_HOURS: float = 2.0
    CHECKIN_OPENS_HOURS: float = 24.0
    CHECKIN_CLOSES_HOURS: float = 1.0
    BOOKING_REFERENCE_PREFIX: str = 'FB'
    BOOKING_REFERENCE_MAX_ATTEMPTS: int = 5

    @field_validator('STORE_RETRY_ATTEMPTS', 'BOOKING_REFERENCE_MAX_ATTEMPTS')
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError('attempt count must be at least 1')
        return v

    @field_validator('KVROCKS_KEY_PREFIX', 'BOOKING_REFERENCE_PREFIX', mode='before')
    @classmethod
    def strip_prefix(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


settings = Settings()  # type: ignore
