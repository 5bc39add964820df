# Put the project root on sys.path so 'modbot', 'main' and 'tests.fixtures' import
# without an editable install.
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def reset_error_aggregator():
    """Start every test with an empty session error summary."""
    from modbot.logging_config import error_aggregator

    error_aggregator.reset()
    yield
    error_aggregator.reset()
