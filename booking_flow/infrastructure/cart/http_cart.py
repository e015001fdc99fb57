from __future__ import annotations

import logging

import httpx

from booking_flow.application.exceptions import CartAddError
from booking_flow.application.ports.cart import CartPort
from booking_flow.core.config import settings


class HttpCartClient(CartPort):
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or settings.CART_API_URL or "").rstrip("/")
        self._api_key = api_key or settings.CART_API_KEY
        self._client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("CART_API_URL is required for the cart client")

    async def add_product(
        self,
        product_id: str,
        quantity: int = 1,
        custom_text_fields: list[dict[str, str]] | None = None,
    ) -> None:
        url = f"{self._base_url}/cart/products"
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        payload = {
            "products": [
                {
                    "productId": product_id,
                    "quantity": quantity,
                    "options": {"customTextFields": custom_text_fields or []},
                }
            ]
        }

        try:
            response = await self._client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("Cart add failed", extra={"reason": str(e)})
            raise CartAddError(str(e) or "Cart add failed") from e

        self._logger.info("Product added to cart", extra={"reason": product_id})

    async def aclose(self) -> None:
        await self._client.aclose()
