from __future__ import annotations

import logging
from dataclasses import dataclass

from booking_flow.application.exceptions import CartAddError, InvalidDestination, InvalidPaymentType
from booking_flow.application.ports.cart import CartPort
from booking_flow.application.ports.navigator import NavigatorPort
from booking_flow.application.ports.page_view import PageViewPort
from booking_flow.application.use_cases.page_transition import PageTransitionBridge
from booking_flow.core.config import settings
from booking_flow.domain.entities.payment_choice import Destination, PaymentChoice, PaymentType
from booking_flow.domain.entities.service_context import PaymentSkus, ServiceContext


@dataclass(frozen=True)
class PaymentOutcome:
    action: str  # "view_cart", "continue_shopping", "booking"
    choice: PaymentChoice
    url: str | None = None


class PaymentChoiceNegotiator:
    def __init__(
        self,
        bridge: PageTransitionBridge,
        cart: CartPort,
        navigator: NavigatorPort,
        view: PageViewPort,
        cart_path: str | None = None,
    ) -> None:
        self._bridge = bridge
        self._cart = cart
        self._navigator = navigator
        self._view = view
        self._cart_path = cart_path or settings.CART_PATH
        self._logger = logging.getLogger(__name__)

    async def choose(
        self,
        service: ServiceContext,
        payment_type: str,
        destination: str,
        skus: PaymentSkus | None = None,
    ) -> PaymentOutcome:
        choice = self.build_choice(service, payment_type, skus or PaymentSkus())
        target = _parse_destination(destination)

        try:
            self._bridge.persist(choice)
        except Exception as e:
            # Transition params still carry the choice
            self._logger.warning(
                "Could not persist payment choice",
                extra={"service_id": service.service_id, "reason": str(e)},
            )

        if target is Destination.cart:
            outcome = await self._add_to_cart(choice)
            if outcome is not None:
                return outcome
        return self._go_to_booking(choice)

    def build_choice(self, service: ServiceContext, payment_type: str, skus: PaymentSkus) -> PaymentChoice:
        try:
            kind = PaymentType(payment_type)
        except ValueError:
            raise InvalidPaymentType(f"Unknown payment type: {payment_type!r}") from None

        if kind is PaymentType.deposit:
            amount, sku = service.deposit, skus.deposit_sku
        else:
            amount, sku = service.price, skus.full_sku
        return PaymentChoice(type=kind, amount=amount, product_sku=sku, service_snapshot=service)

    async def _add_to_cart(self, choice: PaymentChoice) -> PaymentOutcome | None:
        """Returns None when the flow has to fall back to direct booking."""
        if not choice.product_sku:
            self._logger.warning(
                "No product SKU configured, redirecting to booking page",
                extra={"service_id": choice.service_snapshot.service_id},
            )
            return None

        self._view.show_loading("Adding to cart...")
        try:
            await self._cart.add_product(
                choice.product_sku,
                quantity=1,
                custom_text_fields=[
                    {"title": "Service", "value": choice.service_snapshot.name},
                    {"title": "Payment Type", "value": choice.label},
                    {"title": "Service ID", "value": choice.service_snapshot.service_id},
                ],
            )
        except Exception as e:
            error = e if isinstance(e, CartAddError) else CartAddError(str(e))
            self._logger.error(
                "Error adding product to cart",
                extra={"service_id": choice.service_snapshot.service_id, "reason": str(error)},
            )
            self._view.show_error("Failed to add to cart. Redirecting to booking page...")
            return None

        noun = "Deposit" if choice.type is PaymentType.deposit else "Full payment"
        self._view.show_success(f"{noun} added to cart!")

        if await self._view.confirm_go_to_cart():
            self._navigator.to(self._cart_path)
            return PaymentOutcome(action="view_cart", choice=choice, url=self._cart_path)
        self._view.hide_payment_options()
        return PaymentOutcome(action="continue_shopping", choice=choice)

    def _go_to_booking(self, choice: PaymentChoice) -> PaymentOutcome:
        url = self._bridge.booking_url(choice)
        self._navigator.to(url)
        return PaymentOutcome(action="booking", choice=choice, url=url)


def _parse_destination(destination: str) -> Destination:
    try:
        return Destination(destination)
    except ValueError:
        raise InvalidDestination(f"Unknown destination: {destination!r}") from None
