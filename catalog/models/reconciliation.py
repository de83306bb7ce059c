"""Result models for image reconciliation."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from catalog.models.product import Product


class AssetOperationKind(str, Enum):
    UPLOAD = "upload"
    DELETE = "delete"


class ReconciliationOutcome(str, Enum):
    """Overall result of a reconciliation that returned normally."""

    COMPLETED = "completed"
    # The new image is in place but an old asset could not be removed
    COMPLETED_WITH_CLEANUP_WARNING = "completed_with_cleanup_warning"


@dataclass(frozen=True)
class AssetOperation:
    """A single media service call performed during reconciliation."""

    kind: AssetOperationKind
    target: str  # Asset id for deletes, resulting URL for uploads
    succeeded: bool


@dataclass(frozen=True)
class ReconciliationResult:
    """New image reference plus the media service calls that produced it."""

    new_image: str
    operations: List[AssetOperation] = field(default_factory=list)
    outcome: ReconciliationOutcome = ReconciliationOutcome.COMPLETED

    @property
    def deleted_asset_ids(self) -> List[str]:
        """Asset ids for which a delete was attempted, in call order."""
        return [op.target for op in self.operations if op.kind == AssetOperationKind.DELETE]

    @property
    def has_cleanup_warning(self) -> bool:
        return self.outcome == ReconciliationOutcome.COMPLETED_WITH_CLEANUP_WARNING


@dataclass(frozen=True)
class ProductUpdateResult:
    """Persisted product returned by an update, with its image reconciliation."""

    product: Product
    reconciliation: ReconciliationResult
