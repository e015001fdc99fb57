from __future__ import annotations

from abc import ABC, abstractmethod


class CartPort(ABC):
    @abstractmethod
    async def add_product(
        self,
        product_id: str,
        quantity: int = 1,
        custom_text_fields: list[dict[str, str]] | None = None,
    ) -> None:
        """Add a purchasable item to the shopper's cart. Raises CartAddError on failure."""
        raise NotImplementedError
