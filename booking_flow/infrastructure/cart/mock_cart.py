from __future__ import annotations

import logging

from booking_flow.application.exceptions import CartAddError
from booking_flow.application.ports.cart import CartPort


class MockCart(CartPort):
    def __init__(self, fail: bool = False) -> None:
        self.items: list[dict[str, object]] = []
        self._fail = fail
        self._logger = logging.getLogger(__name__)

    async def add_product(
        self,
        product_id: str,
        quantity: int = 1,
        custom_text_fields: list[dict[str, str]] | None = None,
    ) -> None:
        if self._fail:
            raise CartAddError("Mock cart is unavailable")
        self.items.append(
            {"productId": product_id, "quantity": quantity, "customTextFields": list(custom_text_fields or [])}
        )
        self._logger.info("Mock cart product added", extra={"reason": product_id})
