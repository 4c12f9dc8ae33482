"""Domain event dispatch port."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from src.core.entities.events import DomainEvent


class IDomainEventDispatcher(ABC):
    """Receives events drained from aggregates after their write committed."""

    @abstractmethod
    async def dispatch(self, events: Sequence[DomainEvent]) -> None:
        """Deliver events; failures must not undo the committed write."""
        pass
