from pathlib import Path
from typing import Annotated, List, Literal, Optional

import orjson
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Marketplace'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # CORS
    # Comma list in env files (`a,b`); NoDecode keeps pydantic-settings from JSON-parsing it
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and v.strip().startswith('['):
            v = orjson.loads(v)
        if isinstance(v, str):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return [str(i) for i in v]
        return []

    # Record store backend: 'sql' (PostgreSQL / SQLite) or 'airtable' (hosted base)
    RECORD_STORE_BACKEND: Literal['sql', 'airtable'] = 'sql'

    # Database (sql backend)
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'marketplace'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # full async URL, overrides POSTGRES_* when set

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # Connection pool (ignored for SQLite)
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30  # seconds
    DB_POOL_RECYCLE: int = 3600  # seconds
    DB_POOL_PRE_PING: bool = True
    DB_AUTO_CREATE_TABLES: bool = True

    # Airtable (airtable backend)
    AIRTABLE_API_KEY: SecretStr = SecretStr('')
    AIRTABLE_BASE_ID: str = ''
    AIRTABLE_API_URL: str = 'https://api.airtable.com/v0'
    AIRTABLE_TIMEOUT: float = 10.0  # seconds
    AIRTABLE_PRODUCTS_TABLE: str = 'Products'
    AIRTABLE_ORDERS_TABLE: str = 'Orders'


settings = Settings()  # type: ignore
