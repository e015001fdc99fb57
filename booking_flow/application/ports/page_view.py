from __future__ import annotations

from abc import ABC, abstractmethod

from booking_flow.domain.entities.payment_choice import PaymentChoice
from booking_flow.domain.entities.service_context import ServiceContext


class PageViewPort(ABC):
    """User-visible state of the host page. Rendering is up to the adapter."""

    @abstractmethod
    def show_service(self, service: ServiceContext) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_total_price(self, amount: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_selection(self, date_label: str, time_label: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_payment_summary(self, choice: PaymentChoice, remaining_balance: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_loading(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_success(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def show_error(self, message: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def hide_payment_options(self) -> None:
        raise NotImplementedError

    @abstractmethod
    async def confirm_go_to_cart(self) -> bool:
        """Ask whether to view the cart now (True) or keep shopping (False)."""
        raise NotImplementedError
