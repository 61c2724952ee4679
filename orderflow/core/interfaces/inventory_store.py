"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod

from orderflow.core.entities.inventory import (
    AdjustmentMode,
    ProductVariant,
    StockMovement,
)


class IInventoryStore(ABC):
    """
    Interface for variant stock counters and their movement log.

    Only the reserve/release/adjust operations may change stock, and each of
    them records a StockMovement in the same transaction.
    """

    @abstractmethod
    async def create_variant(self, variant: ProductVariant) -> ProductVariant:
        """Create a catalog variant with its opening stock."""
        pass

    @abstractmethod
    async def get_variant(self, variant_id: str) -> ProductVariant | None:
        """Get variant by ID."""
        pass

    @abstractmethod
    async def list_variants(
        self, limit: int | None = 100, offset: int = 0
    ) -> list[ProductVariant]:
        """List variants with pagination. A ``None`` limit returns the whole catalog."""
        pass

    @abstractmethod
    async def reserve_many(
        self,
        lines: dict[str, int],
        reference: str | None = None,
        performed_by: str | None = None,
    ) -> list[ProductVariant]:
        """
        Decrement stock for every variant in ``lines`` or for none of them.

        Raises:
            InsufficientStockError: a variant holds fewer sets than requested.
            VariantNotFoundError: a variant does not exist.
        """
        pass

    @abstractmethod
    async def release_many(
        self,
        lines: dict[str, int],
        reference: str | None = None,
        performed_by: str | None = None,
    ) -> list[ProductVariant]:
        """Increment stock for every variant in ``lines``."""
        pass

    @abstractmethod
    async def adjust(
        self,
        variant_id: str,
        mode: AdjustmentMode,
        value: int,
        reason: str,
        performed_by: str | None = None,
    ) -> ProductVariant:
        """Apply an admin stock correction (SET, or DELTA clamped at zero)."""
        pass

    @abstractmethod
    async def get_movements(self, variant_id: str, limit: int = 100) -> list[StockMovement]:
        """Get movements for a variant, newest first."""
        pass
