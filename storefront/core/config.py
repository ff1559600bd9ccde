"""
Core configuration and settings for the Storefront service
Following FastAPI best practices for configuration management
"""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Service information
    service_name: str = Field(default="storefront")
    service_version: str = Field(default="1.0.0")
    environment: str = Field(default="development")

    # Server configuration
    port: int = Field(default=8003)
    host: str = Field(default="0.0.0.0")

    # Logging configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_to_file: bool = Field(default=False)
    log_to_console: bool = Field(default=True)
    log_file_path: str = Field(default="logs/storefront.log")

    correlation_id_header: str = Field(default="X-Correlation-ID")

    # Catalog source (spreadsheet-backed record API)
    catalog_base_url: str = Field(default="https://n8n-nocodb.hvo3jf.easypanel.host")
    catalog_api_token: Optional[str] = Field(default=None)
    catalog_garments_table: str = Field(default="mp5ukvigb8y2hnx")
    catalog_garments_view: Optional[str] = Field(default="vwmb6wabkp5a36za")
    catalog_accessories_table: str = Field(default="mwrbfzn0e5e7x1y")
    catalog_accessories_view: Optional[str] = Field(default="vwejmjwe478vt03p")
    catalog_addons_table: str = Field(default="mpbvibjnz5kaf24")
    catalog_addons_view: Optional[str] = Field(default="vw6vav32narvatfh")
    catalog_page_size: int = Field(default=100, gt=0)
    catalog_max_pages: int = Field(default=50, gt=0)
    catalog_timeout_seconds: float = Field(default=10.0, gt=0)
    catalog_revalidate_seconds: int = Field(default=3600, ge=0)
    catalog_retry_seconds: int = Field(default=60, ge=0)

    # Normalizer
    default_gender: str = Field(default="hombre")
    custom_edition: str = Field(default="Personalizado")

    # Media forwarding
    media_proxy_path: str = Field(default="/api/images")
    media_cache_control: str = Field(default="public, max-age=31536000, immutable")
    media_placeholder: str = Field(default="/placeholder.jpg")
    media_allowed_prefixes: List[str] = Field(default_factory=lambda: ["download/"])

    # Pricing
    fringe_addon_fee: float = Field(default=6.0, ge=0)
    fringe_addon_record_name: str = Field(default="tzitzits_add")

    # Cart storage
    cart_namespace: str = Field(default="alef-cart")
    mongodb_host: str = Field(default="localhost")
    mongodb_port: int = Field(default=27017)
    mongodb_username: Optional[str] = Field(default=None)
    mongodb_password: Optional[str] = Field(default=None)
    mongodb_database: str = Field(default="storefront")
    mongodb_auth_source: str = Field(default="admin")

    @property
    def mongodb_url(self) -> str:
        """Construct MongoDB connection URL"""
        if self.mongodb_username and self.mongodb_password:
            return (
                f"mongodb://{self.mongodb_username}:{self.mongodb_password}"
                f"@{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"
                f"?authSource={self.mongodb_auth_source}"
            )
        return f"mongodb://{self.mongodb_host}:{self.mongodb_port}/{self.mongodb_database}"

    # Checkout
    order_webhook_url: str = Field(default="https://paneln8n.erickpinargote.com/webhook/alef")
    order_webhook_timeout_seconds: float = Field(default=15.0, gt=0)
    min_phone_length: int = Field(default=10, ge=1)
    whatsapp_number: str = Field(default="593983811117")
    whatsapp_order_message: str = Field(
        default="Hola Alef, adjunto mi comprobante de pago para la orden con celular {phone}"
    )
    whatsapp_custom_order_message: str = Field(
        default="Hola, quisiera más información sobre camisas personalizadas"
    )


# Global config instance
config = Config()
