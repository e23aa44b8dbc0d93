class IntegrationError(Exception):
    """Исключение для ошибок интеграции с внешними системами."""
    pass


class ShopifyResponseError(IntegrationError):
    """Shopify ответил 2xx, но тело ответа не удалось разобрать."""

    def __init__(self, message: str, status_code: int | None = None, body_preview: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body_preview = body_preview
