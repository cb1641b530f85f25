import os
from collections.abc import Callable

import pytest
from hypothesis import HealthCheck, settings

from ember.ember_parser import parse_expression

# Coverage for subprocess-launched CLI runs
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

settings.register_profile(
    "ci", max_examples=300, suppress_health_check=[HealthCheck.too_slow]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


@pytest.fixture  # type: ignore[misc]
def sexpr() -> Callable[[str], str]:
    """Parses one expression and returns its S-expression text."""

    def _sexpr(source: str) -> str:
        return str(parse_expression(source))

    return _sexpr
