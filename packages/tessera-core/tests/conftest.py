"""Shared pytest fixtures for tessera-core tests.

This module provides common fixtures used across unit and integration tests.
"""

from __future__ import annotations

import sys

import pytest
import structlog

from tessera_core.environment import InMemoryEnvironment
from tessera_core.schemas import Artifact, DeployStep, InvokeStep, Reference, Sequence


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture.

    This fixture ensures structlog outputs to stdout so that test
    output shows structured log lines.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def accounts() -> list[str]:
    """Three well-formed development account addresses."""
    return [
        "0xd73A01C4b9D7175EFa05f414E757e75fc1e14b9F",
        "0x168fbF3566166A088ca6D392F00087197DccBD02",
        "0xA791c85dF0CC0866dddDF5dCfC2dda639dFA83Bf",
    ]


@pytest.fixture
def simplest_vote() -> Artifact:
    """Standalone voting contract with no constructor arguments."""
    return Artifact(name="SimplestVote1202", bytecode="0x6080")


@pytest.fixture
def sample_token() -> Artifact:
    """Token contract referenced by the token vote."""
    return Artifact(
        name="SampleToken",
        bytecode="0x6080",
        abi=[{"type": "function", "name": "transfer"}, {"type": "constructor"}],
    )


@pytest.fixture
def token_vote() -> Artifact:
    """Token-weighted vote with an ``init`` entry point."""
    return Artifact(
        name="TokenVote1202",
        bytecode="0x6080",
        abi=[{"type": "function", "name": "init"}, {"type": "function", "name": "vote"}],
    )


@pytest.fixture
def environment() -> InMemoryEnvironment:
    """Fresh in-memory environment."""
    return InMemoryEnvironment()


@pytest.fixture
def init_sequence(
    sample_token: Artifact, token_vote: Artifact, accounts: list[str]
) -> Sequence:
    """Deploy token and vote, then initialize the vote with the token address."""
    return Sequence(
        name="token-vote",
        steps=[
            DeployStep(artifact=sample_token),
            DeployStep(artifact=token_vote),
            InvokeStep(
                target=Reference(step=1),
                method="init",
                args=[Reference(step=0), [1, 2, 3], accounts],
            ),
        ],
    )
