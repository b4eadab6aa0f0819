"""
OAuth Transaction Store

Correlates a flow started at /oauth/start with its later provider callback.
Each state token is consumed at most once; an unknown or reused token is
always rejected.
"""
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Transaction:
    """A pending OAuth flow."""
    state: str
    redirect_target: str
    provider: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class TransactionStoreError(RuntimeError):
    """Base error for transaction store failures."""


class TransactionNotFoundError(TransactionStoreError):
    """Raised when a state is unknown or has already been consumed."""


class TransactionStore(ABC):
    """Key-value store of pending OAuth transactions."""

    @abstractmethod
    def create(self, redirect_target: str, provider: str) -> Transaction:
        """Issue a fresh state token bound to the caller's redirect target."""

    @abstractmethod
    def consume(self, state: str) -> Transaction:
        """Remove and return the transaction for ``state``.

        Raises:
            TransactionNotFoundError: If the state is unknown or already consumed
        """

    @abstractmethod
    def peek(self, state: str) -> Optional[Transaction]:
        """Return the pending transaction for ``state`` without consuming it."""

    def exists(self, state: str) -> bool:
        """Check whether ``state`` is pending, without consuming it."""
        return self.peek(state) is not None

    @abstractmethod
    def count(self) -> int:
        """Number of pending transactions."""

    @staticmethod
    def generate_state() -> str:
        """Generate secure random state token (256 bits, URL-safe)."""
        return secrets.token_urlsafe(32)


class InMemoryTransactionStore(TransactionStore):
    """Thread-safe, process-local transaction store.

    Entries for abandoned flows are never reclaimed; they live until the
    process restarts.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, Transaction] = {}
        self._lock = Lock()

    def create(self, redirect_target: str, provider: str) -> Transaction:
        with self._lock:
            state = self.generate_state()
            while state in self._pending:
                state = self.generate_state()
            transaction = Transaction(
                state=state,
                redirect_target=redirect_target,
                provider=provider,
            )
            self._pending[state] = transaction

        logger.info("oauth_state_created", provider=provider, state=state)
        return transaction

    def consume(self, state: str) -> Transaction:
        with self._lock:
            transaction = self._pending.pop(state, None)

        if transaction is None:
            logger.warning("oauth_state_not_found", state=state)
            raise TransactionNotFoundError(state)

        logger.info(
            "oauth_state_consumed",
            provider=transaction.provider,
            state=state,
            age_seconds=(datetime.now(timezone.utc) - transaction.created_at).total_seconds(),
        )
        return transaction

    def peek(self, state: str) -> Optional[Transaction]:
        with self._lock:
            return self._pending.get(state)

    def count(self) -> int:
        with self._lock:
            return len(self._pending)
