"""ProcessPendingCartCleanups command + handler — finish clearing carts.

Invoked by a background job or cron. A checkout whose order was placed but
whose cart rows could not be deleted leaves a PendingCartCleanup behind; this
handler deletes those rows and resolves the record.
"""

import structlog
from protean import handle
from protean.fields import Integer
from shared.errors import StoreUnavailable

from ordering.cart.cart_item import CartItem
from ordering.domain import ordering
from ordering.store import get_store

logger = structlog.get_logger(__name__)


@ordering.command(part_of="CartItem")
class ProcessPendingCartCleanups:
    """Request to resolve pending cart cleanups."""

    limit = Integer(min_value=1)  # Optional: at most this many records per run


def process_pending_cleanups(store, limit=None) -> int:
    """Resolve pending cleanups; return how many were resolved.

    A record whose rows cannot be deleted stays pending for the next run.
    """
    try:
        pending = store.pending_cleanups()
    except StoreUnavailable as exc:
        logger.warning("Could not list pending cart cleanups", error=exc.detail)
        return 0

    if limit:
        pending = pending[:limit]

    resolved = 0
    for cleanup in pending:
        try:
            store.delete_cart_items(cleanup.cart_item_ids)
            store.resolve_pending_cleanup(cleanup.id)
        except StoreUnavailable as exc:
            logger.warning(
                "Pending cart cleanup failed, will retry",
                cleanup_id=cleanup.id,
                order_id=cleanup.order_id,
                error=exc.detail,
            )
            continue
        resolved += 1

    if resolved:
        logger.info("Resolved pending cart cleanups", count=resolved)
    return resolved


@ordering.command_handler(part_of=CartItem)
class ProcessPendingCartCleanupsHandler:
    @handle(ProcessPendingCartCleanups)
    def process_pending(self, command: ProcessPendingCartCleanups):
        return process_pending_cleanups(get_store(), limit=command.limit)
