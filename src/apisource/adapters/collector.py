"""In-process host that collects nodes and their derived fields."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO
from uuid import uuid4

from apisource.domain.ports.host import HostServices

if TYPE_CHECKING:
    from collections.abc import Iterator

    from apisource.domain._types import JsonObject
    from apisource.domain.nodes import Node
    from apisource.domain.ports.host import IdGenerator


def new_node_id() -> str:
    return str(uuid4())


@dataclass(slots=True)
class NodeCollector:
    nodes: list[Node] = field(default_factory=list)
    node_fields: dict[tuple[str, str], dict[str, object]] = field(default_factory=dict)

    def create_node(self, node: Node) -> None:
        self.nodes.append(node)

    def create_node_field(self, *, node: Node, name: str, value: object) -> None:
        self.node_fields.setdefault((node.type, node.id), {})[name] = value

    def services(self, *, generate_id: IdGenerator = new_node_id) -> HostServices:
        return HostServices(
            generate_id=generate_id,
            register_node=self.create_node,
            register_field=self.create_node_field,
        )

    def records(self, *, include_dummy: bool = False) -> Iterator[JsonObject]:
        """Yield node records with derived values attached under ``fields``."""

        for node in self.nodes:
            if node.is_dummy and not include_dummy:
                continue
            record = node.to_record()
            derived = self.node_fields.get((node.type, node.id))
            if derived:
                record["fields"] = dict(derived)  # pyright: ignore[reportArgumentType]
            yield record

    def write_jsonl(self, handle: TextIO, *, include_dummy: bool = False) -> int:
        count = 0
        for record in self.records(include_dummy=include_dummy):
            handle.write(json.dumps(record, ensure_ascii=False, default=str))
            handle.write("\n")
            count += 1
        return count
