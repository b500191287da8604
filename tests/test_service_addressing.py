"""
Tests for precomputed addressing lookup.
"""

import logging
import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.models import Addressing, ResolutionError
from services.addressing import PrecomputedAddressing


@pytest.fixture
def resolver():
    """Resolver with two precomputed queue entries."""
    return PrecomputedAddressing({
        7: {
            'hash': 'abc123',
            'unsubscribe': 'u/unsub/7/abc123',
            'reply': 'reply@acme.test',
            'urls': {'optOut': 'https://acme.test/optout/7'}
        },
        '8': {
            'hash': 'def456',
            'unsubscribe': 'u/unsub/8/def456'
        },
    })


class TestPrecomputedAddressing:
    """Test PrecomputedAddressing lookups."""

    def test_resolve_success(self, resolver):
        """Test lookup returns Addressing for a known queue entry."""
        addressing = resolver(42, 7, 'abc123', 'u@ex.test')

        assert addressing == Addressing(
            unsubscribe='u/unsub/7/abc123',
            reply='reply@acme.test',
            urls={'optOut': 'https://acme.test/optout/7'}
        )

    def test_queue_id_string_or_int(self, resolver):
        """Test queue ids match regardless of int/str form."""
        assert resolver(42, '7', 'abc123', 'u@ex.test').reply == 'reply@acme.test'

    def test_len(self, resolver):
        assert len(resolver) == 2

    @pytest.mark.parametrize('bad_hash', ['', 'abc-123', 'abc 123', None])
    def test_malformed_hash(self, resolver, bad_hash):
        """Test malformed hashes are rejected."""
        with pytest.raises(ResolutionError) as exc_info:
            resolver(42, 7, bad_hash, 'u@ex.test')

        assert 'malformed hash' in str(exc_info.value)
        assert exc_info.value.event_queue_id == 7

    def test_unknown_queue_entry(self, resolver):
        """Test unknown queue id is rejected."""
        with pytest.raises(ResolutionError) as exc_info:
            resolver(42, 99, 'abc123', 'u@ex.test')

        assert exc_info.value.event_queue_id == 99

    def test_hash_mismatch(self, resolver):
        """Test a valid-looking hash for the wrong entry is rejected."""
        with pytest.raises(ResolutionError, match='does not match'):
            resolver(42, 7, 'def456', 'u@ex.test')

    def test_incomplete_entry(self, resolver):
        """Test entry without reply address is rejected."""
        with pytest.raises(ResolutionError, match="missing"):
            resolver(42, 8, 'def456', 'v@ex.test')

    @pytest.mark.parametrize('entry', ['oops', ['abc123'], 7, True])
    def test_malformed_queue_entry(self, entry):
        """Test a queue entry that is not a mapping raises ResolutionError."""
        resolver = PrecomputedAddressing({'7': entry})

        with pytest.raises(ResolutionError, match='malformed queue entry') as exc_info:
            resolver(42, 7, 'abc123', 'u@ex.test')

        assert exc_info.value.event_queue_id == 7

    def test_malformed_urls(self):
        """Test non-mapping urls raise ResolutionError."""
        resolver = PrecomputedAddressing({
            '7': {'hash': 'abc123', 'unsubscribe': 'u', 'reply': 'r', 'urls': 'https://x'}
        })

        with pytest.raises(ResolutionError, match="'urls'"):
            resolver(42, 7, 'abc123', 'u@ex.test')

    def test_debug_log_omits_recipient_address(self, resolver, caplog):
        """Test the lookup log names the queue entry but not the recipient."""
        with caplog.at_level(logging.DEBUG, logger='services.addressing'):
            resolver(42, 7, 'abc123', 'u@ex.test')

        assert 'queue 7' in caplog.text
        assert 'u@ex.test' not in caplog.text

    def test_empty_entries(self):
        """Test resolver with no entries rejects everything."""
        with pytest.raises(ResolutionError):
            PrecomputedAddressing(None)(42, 7, 'abc123', 'u@ex.test')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
