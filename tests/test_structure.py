import pytest

from app.models import NavigationNode, NodeKind
from app.services.structure import (
    StructureDerivationFailure,
    build_structure,
    link_structure,
    linkify,
)



def explicit(label, link):
    return NavigationNode(kind=NodeKind.EXPLICIT, label=label, link=link)


def implicit(label, link, children):
    return NavigationNode(kind=NodeKind.IMPLICIT, label=label, link=link, children=children)


def test_parent_stop_is_start_of_last_child():
    parent = implicit("Part", "/item/time/0,999/", [
        explicit("A", "/item/time/0,30/"),
        explicit("B", "/item/time/30,60/"),
    ])

    result = link_structure([parent])

    assert result.failures == []
    assert parent.link == "/item/time/0,30/"


def test_linkify_returns_new_link_without_mutating():
    parent = implicit("Part", "#/time/5,999/", [explicit("A", "#/time/40,50/")])
    assert linkify(parent) == "#/time/5,40/"
    assert parent.link == "#/time/5,999/"


def test_nested_implicit_children_are_linked_first():
    inner = implicit("Inner", "/time/20,999/", [
        explicit("A", "/time/20,30/"),
        explicit("B", "/time/45,60/"),
    ])
    outer = implicit("Outer", "/time/0,999/", [explicit("Intro", "/time/0,20/"), inner])

    link_structure([outer])

    assert inner.link == "/time/20,45/"
    # Outer reads the already rewritten link of its last child
    assert outer.link == "/time/0,20/"


def test_failures_do_not_stop_siblings():
    empty = implicit("Empty", "/time/0,10/", [])
    bad_child = implicit("Bad child", "/time/0,10/", [explicit("X", "/no-time/")])
    good = implicit("Good", "/time/0,999/", [explicit("A", "/time/0,5/"), explicit("B", "/time/5,9/")])

    result = link_structure([empty, bad_child, good])

    assert [f.label for f in result.failures] == ["Empty", "Bad child"]
    assert empty.link == "/time/0,10/"
    assert bad_child.link == "/time/0,10/"
    assert good.link == "/time/0,5/"


def test_linkify_without_children_raises():
    with pytest.raises(StructureDerivationFailure):
        linkify(implicit("Empty", "/time/0,10/", []))


def test_explicit_nodes_are_left_alone():
    node = explicit("Leaf", "/time/3,4/")
    result = link_structure([node])
    assert node.link == "/time/3,4/"
    assert result.failures == []


def test_build_structure_from_manifest(manifest):
    nodes = build_structure(manifest, base_url="/watch")

    assert [n.label for n in nodes] == ["Part 1", "Part 2", "Broken"]
    part1, part2, broken = nodes

    assert part1.kind is NodeKind.IMPLICIT
    assert [c.link for c in part1.children] == [
        "/watch#/canvas/0/time/10,30/",
        "/watch#/canvas/0/time/30,60/",
    ]
    assert part1.link == "/watch#/canvas/0/time/10,30/"

    assert part2.kind is NodeKind.EXPLICIT
    assert part2.link == "/watch#/canvas/1/time/0,120/"

    # The only child pointed at an unknown canvas
    assert broken.kind is NodeKind.IMPLICIT
    assert broken.children == []


def test_build_and_link_manifest_structure(manifest):
    result = link_structure(build_structure(manifest))

    part1 = result.nodes[0]
    assert part1.link == "#/canvas/0/time/10,30/"
    assert [f.label for f in result.failures] == ["Broken"]


def test_missing_stop_in_media_fragment_uses_canvas_duration(manifest_data):
    from app.services.manifest import Manifest

    manifest_data["structures"] = [{
        "type": "Range", "label": "Whole",
        "items": [{"type": "Canvas", "id": "https://example.org/canvas/0#t=15"}],
    }]
    nodes = build_structure(Manifest(manifest_data))
    assert nodes[0].link == "#/canvas/0/time/15,600/"


def test_malformed_media_fragment_skips_only_that_range(manifest_data):
    from app.services.manifest import Manifest

    manifest_data["structures"].append({
        "type": "Range", "label": "Bad fragment",
        "items": [{"type": "Canvas", "id": "https://example.org/canvas/0#t=.,5"}],
    })
    nodes = build_structure(Manifest(manifest_data))

    assert [n.label for n in nodes] == ["Part 1", "Part 2", "Broken"]
