"""Services the embedding host provides to the pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from apisource.config.env import env_flag

if TYPE_CHECKING:
    from apisource.domain.nodes import Node

DEVELOPMENT_ENV_VAR = "APISOURCE_ENV"
REFRESH_ENDPOINT_ENV_VAR = "ENABLE_REFRESH_ENDPOINT"


@runtime_checkable
class IdGenerator(Protocol):
    """Return a new globally unique node id on every call."""

    def __call__(self) -> str: ...


@runtime_checkable
class NodeSink(Protocol):
    def __call__(self, node: Node) -> None: ...


@runtime_checkable
class FieldSink(Protocol):
    def __call__(self, *, node: Node, name: str, value: object) -> None: ...


@dataclass(slots=True, frozen=True)
class HostServices:
    """Capability set handed to the normalizer instead of global singletons."""

    generate_id: IdGenerator
    register_node: NodeSink
    register_field: FieldSink


@dataclass(slots=True, frozen=True)
class HostEnvironment:
    development: bool = False
    refresh_endpoint_enabled: bool = False

    @classmethod
    def from_environment(cls) -> HostEnvironment:
        return cls(
            development=os.getenv(DEVELOPMENT_ENV_VAR, "").strip().lower() == "development",
            refresh_endpoint_enabled=env_flag(REFRESH_ENDPOINT_ENV_VAR),
        )
