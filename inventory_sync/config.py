from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    inventory_backend: str = 'mock'

    shopify_shop_url: str | None = None
    shopify_access_token: str | None = None
    shopify_api_version: str = '2023-10'

    walmart_api_base_url: str = 'https://marketplace.walmartapis.com'
    walmart_access_token: str | None = None
    walmart_service_name: str = 'Walmart Marketplace'

    backend_timeout_seconds: int = 30
    mutation_debounce_ms: int = 100
    log_level: str = 'INFO'

    @property
    def shopify_admin_base_url(self) -> str:
        url = (self.shopify_shop_url or '').strip().rstrip('/')
        if url and not url.startswith(('http://', 'https://')):
            url = 'https://' + url
        return f'{url}/admin/api/{self.shopify_api_version}'

    @property
    def mutation_debounce_seconds(self) -> float:
        return max(self.mutation_debounce_ms, 0) / 1000


settings = Settings()
