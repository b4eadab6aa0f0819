"""
Tests for the OAuth transaction store.
"""
import threading

import pytest

from app.services.oauth import (
    InMemoryTransactionStore,
    TransactionNotFoundError,
    TransactionStore,
)


class TestInMemoryTransactionStore:
    """Test state issuing and single-use consumption."""

    def test_create_issues_unguessable_state(self, store):
        """Test that each flow gets a fresh high-entropy state."""
        # Act
        first = store.create("https://vibe.example.com/app", "spotify")
        second = store.create("https://vibe.example.com/app", "spotify")

        # Assert
        assert first.state != second.state
        assert len(first.state) >= 43  # 32 random bytes, URL-safe base64
        assert first.redirect_target == "https://vibe.example.com/app"
        assert first.provider == "spotify"
        assert store.count() == 2

    def test_consume_returns_transaction_once(self, store):
        """Test that a state can be consumed exactly one time."""
        # Arrange
        transaction = store.create("https://vibe.example.com/", "google")

        # Act
        consumed = store.consume(transaction.state)

        # Assert
        assert consumed == transaction
        assert not store.exists(transaction.state)
        with pytest.raises(TransactionNotFoundError):
            store.consume(transaction.state)

    def test_consume_unknown_state(self, store):
        """Test that a state never issued is rejected."""
        with pytest.raises(TransactionNotFoundError):
            store.consume("forged-state")

    def test_exists_does_not_consume(self, store):
        """Test that peeking leaves the transaction pending."""
        # Arrange
        transaction = store.create("https://vibe.example.com/", "spotify")

        # Act & Assert
        assert store.exists(transaction.state)
        assert store.exists(transaction.state)
        assert store.count() == 1
        assert not store.exists("other-state")

    def test_generate_state_is_url_safe(self):
        """Test that states can be passed in a query string unescaped."""
        state = TransactionStore.generate_state()

        assert state.replace("-", "").replace("_", "").isalnum()

    def test_concurrent_consume_has_single_winner(self):
        """Test that racing callbacks cannot both consume one state."""
        # Arrange
        store = InMemoryTransactionStore()
        transaction = store.create("https://vibe.example.com/", "spotify")
        winners = []
        barrier = threading.Barrier(8)

        def attempt():
            barrier.wait()
            try:
                winners.append(store.consume(transaction.state))
            except TransactionNotFoundError:
                pass

        # Act
        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        assert len(winners) == 1
        assert store.count() == 0
