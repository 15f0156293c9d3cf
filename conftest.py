# Ensure tests import the service package from this directory first, so
# `import unilite.*` behaves the same with and without an installed copy.
import os
import sys

import pytest

SERVICE_ROOT = os.path.dirname(__file__)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)


@pytest.fixture
def registry():
    """A fresh in-memory session registry per test."""
    from unilite.session import InMemorySessionRegistry

    return InMemorySessionRegistry()
