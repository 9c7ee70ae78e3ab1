"""Settings for the topology orchestrator."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    broker_host: str = Field(..., validation_alias="BROKER_HOST")
    broker_port: int = Field(5672, validation_alias="BROKER_PORT")
    broker_user: str = Field("guest", validation_alias="BROKER_USER")
    broker_password: str = Field("guest", validation_alias="BROKER_PASSWORD")
    broker_vhost: str = Field("/", validation_alias="BROKER_VHOST")

    # Number of channels opened by create_channels.
    channel_concurrency: int = Field(1, validation_alias="CHANNEL_CONCURRENCY")

    connection_backend: str = Field("rabbitmq", validation_alias="CONNECTION_BACKEND")
    redelivery_cache_backend: str = Field("inmemory", validation_alias="REDELIVERY_CACHE_BACKEND")
    redelivery_cache_size: int = Field(1000, validation_alias="REDELIVERY_CACHE_SIZE")
