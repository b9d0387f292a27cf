from __future__ import annotations

import io
import json
import uuid

from apisource.adapters.collector import NodeCollector, new_node_id
from apisource.domain.nodes import Node, NodeInternal


def _node(node_id: str, node_type: str = "Post") -> Node:
    return Node(
        id=node_id,
        internal=NodeInternal(type=node_type, content_digest="d"),
        fields={"title": node_id},
    )


def test_new_node_id_is_unique_uuid() -> None:
    first, second = new_node_id(), new_node_id()

    assert first != second
    assert uuid.UUID(first)


def test_services_route_to_collector() -> None:
    collector = NodeCollector()
    services = collector.services(generate_id=lambda: "fixed")
    node = _node(services.generate_id())

    services.register_node(node)
    services.register_field(node=node, name="slug", value="fixed-slug")

    assert collector.nodes == [node]
    assert collector.node_fields == {("Post", "fixed"): {"slug": "fixed-slug"}}


def test_dummy_fields_of_different_types_stay_apart() -> None:
    collector = NodeCollector()
    post, tag = _node("dummy", "Post"), _node("dummy", "Tag")

    collector.create_node_field(node=post, name="n", value=1)
    collector.create_node_field(node=tag, name="n", value=2)

    assert collector.node_fields[("Post", "dummy")] == {"n": 1}
    assert collector.node_fields[("Tag", "dummy")] == {"n": 2}


def test_write_jsonl_skips_dummy_by_default() -> None:
    collector = NodeCollector()
    real, dummy = _node("a"), _node("dummy")
    collector.create_node(real)
    collector.create_node(dummy)
    collector.create_node_field(node=real, name="slug", value="a-slug")

    handle = io.StringIO()
    written = collector.write_jsonl(handle)

    lines = handle.getvalue().splitlines()
    assert written == 1
    record = json.loads(lines[0])
    assert record["id"] == "a"
    assert record["title"] == "a"
    assert record["fields"] == {"slug": "a-slug"}

    assert collector.write_jsonl(io.StringIO(), include_dummy=True) == 2
