"""Test utilities for synth servers.

    from synth.testing import TestClient
"""

from synth.testing.client import TestClient, TestResponse

__all__ = ["TestClient", "TestResponse"]
