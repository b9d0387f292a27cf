from __future__ import annotations

import itertools
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from apisource.adapters.collector import NodeCollector
from apisource.adapters.http_resilience import ResilientClient
from apisource.config.http_resilience import ResilienceConfig, RetryPolicy
from tests.support.fakes import FakeClock

if TYPE_CHECKING:
    from collections.abc import Callable

    from apisource.domain.ports.host import HostServices
    from tests.support.fakes import Handler

    ClientFactory = Callable[[ResilienceConfig], ResilientClient]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 12, tzinfo=UTC))


@pytest.fixture
def resilience() -> ResilienceConfig:
    return ResilienceConfig(name="test", retry=RetryPolicy(total=0))


@pytest.fixture
def make_client_factory() -> Callable[[Handler], ClientFactory]:
    def build(handler: Handler) -> ClientFactory:
        def factory(config: ResilienceConfig) -> ResilientClient:
            return ResilientClient(config, transport=httpx.MockTransport(handler))

        return factory

    return build


@pytest.fixture
def collector() -> NodeCollector:
    return NodeCollector()


@pytest.fixture
def host(collector: NodeCollector) -> HostServices:
    counter = itertools.count(1)
    return collector.services(generate_id=lambda: f"node-{next(counter)}")
