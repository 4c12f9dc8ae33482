"""
Domain event dispatch.

Events are handed over after the write that raised them has committed, so
a failing dispatcher is logged and never rolls anything back.
"""

from collections.abc import Sequence

from src.config import get_logger
from src.core.entities.events import DomainEvent
from src.core.interfaces.events import IDomainEventDispatcher

logger = get_logger(__name__)


class LoggingEventDispatcher(IDomainEventDispatcher):
    """Writes every event to the structured log."""

    async def dispatch(self, events: Sequence[DomainEvent]) -> None:
        for event in events:
            logger.info(
                "domain_event",
                event_type=event.event_type,
                **event.model_dump(mode="json"),
            )


async def publish_events(
    dispatcher: IDomainEventDispatcher,
    events: Sequence[DomainEvent],
) -> None:
    """Dispatch drained events; dispatcher errors are logged only."""
    if not events:
        return
    try:
        await dispatcher.dispatch(events)
    except Exception as e:
        logger.error(
            "event_dispatch_failed",
            event_types=[event.event_type for event in events],
            error=str(e),
            error_type=type(e).__name__,
        )
