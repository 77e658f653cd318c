"""
MailWarden Detection Strategy Base Class

Abstract base class for all detection strategies and the shared, read-only
detection context.
"""

import logging
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mailwarden.models.email import Message, Recipient
from mailwarden.models.detection import DetectionSignal, SignalType
from mailwarden.utils.helpers import extract_domain, is_internal_domain

logger = logging.getLogger(__name__)


class DetectionContext(BaseModel):
    """
    Organization-wide configuration shared by every strategy.

    internal_domains are the protected organization's own domains and decide
    whether a sender is external. trusted_domains are legitimate partners and
    are only used for look-alike comparison.
    """
    internal_domains: Tuple[str, ...] = Field(default_factory=tuple)
    trusted_domains: Tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @field_validator("internal_domains", "trusted_domains", mode="before")
    @classmethod
    def _normalise(cls, value: Optional[Iterable[str]]) -> Tuple[str, ...]:
        if not value:
            return ()
        if isinstance(value, str):
            value = [value]
        return tuple(d.strip().lower() for d in value if d and d.strip())

    def is_internal(self, domain: str) -> bool:
        return is_internal_domain(domain, self.internal_domains)


class DetectionStrategy(ABC):
    """
    Abstract base class for all detection strategies.

    Each strategy must define:
    - name: Human-readable name
    - signal_types: The signal types it may emit

    Each strategy must implement:
    - detect(): Return a DetectionSignal when the message matches the
      strategy's pattern, None otherwise. detect() is a pure function of its
      inputs and must not raise on malformed data.
    """

    name: str = "Base Strategy"
    signal_types: FrozenSet[SignalType] = frozenset()

    @abstractmethod
    def detect(
        self,
        message: Message,
        recipient: Optional[Recipient],
        context: DetectionContext,
    ) -> Optional[DetectionSignal]:
        """
        Evaluate strategy against a message.

        Args:
            message: Message under analysis
            recipient: Known recipient identity, None if unknown or external
            context: Shared detection context

        Returns:
            DetectionSignal if the strategy matched, None otherwise
        """

    def create_signal(
        self,
        signal_type: SignalType,
        confidence: float,
        evidence: str,
    ) -> DetectionSignal:
        """Create a signal of one of this strategy's types."""
        if signal_type not in self.signal_types:
            raise ValueError(f"{self.name} cannot emit {signal_type.value}")
        return DetectionSignal(
            signal_type=signal_type,
            confidence=confidence,
            evidence=evidence,
        )

    def get_sender_domain(self, message: Message) -> str:
        """Get lower-cased sender domain, empty when the address is malformed."""
        return extract_domain(message.sender_email)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name!r}>"
