"""Compose Invoice Use Case: memo or tax invoice for one stored order."""

from orderflow.application.dto.requests import ComposeInvoiceRequest
from orderflow.application.services import get_invoice_composer
from orderflow.config import get_logger
from orderflow.core.entities.invoice import InvoiceDocument
from orderflow.core.exceptions import OrderNotFoundError
from orderflow.core.interfaces.order_store import IOrderStore
from orderflow.core.services.invoice_composer import InvoiceComposer

logger = get_logger(__name__)


class ComposeInvoiceUseCase:
    def __init__(
        self,
        order_store: IOrderStore | None = None,
        composer: InvoiceComposer | None = None,
    ):
        self._order_store = order_store
        self._composer = composer or get_invoice_composer()

    async def _get_order_store(self) -> IOrderStore:
        if self._order_store is None:
            from orderflow.infrastructure.storage.sqlite import get_order_store

            self._order_store = await get_order_store()
        return self._order_store

    async def execute(self, request: ComposeInvoiceRequest) -> InvoiceDocument:
        order = await (await self._get_order_store()).get_order(request.order_id)
        if order is None:
            raise OrderNotFoundError(request.order_id)

        document = self._composer.compose(order, request.mode)
        logger.info(
            "invoice_composed",
            order_id=order.id,
            mode=request.mode.value,
            grand_total=str(document.grand_total),
        )
        return document
