from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage
    STORAGE_BACKEND: Literal["redis", "memory"] = "redis"
    REDIS_URL: str = "redis://redis"
    REDIS_POOL_TIMEOUT: float = 5.0
    INGESTOR_POOL_SIZE: int = 2
    SERVER_POOL_SIZE: int = 5

    # Ledger node
    NODE_WS_URL: str = "ws://ganache:8545"
    TRANSPORT_RECV_TIMEOUT: float = 1.0

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 80

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "allow"


settings = Settings()
