from __future__ import annotations

from bom_normalizer.consolidators import ComponentRegistry, DependencyGraphBuilder
from bom_normalizer.generators import ModelConverter, generate_package_url
from bom_normalizer.models import Artifact, UsageReport, UsageScope


def test_upsert_creates_once_and_merges_scope(core: Artifact) -> None:
    registry = ComponentRegistry()
    identity = generate_package_url(core)

    first = registry.upsert(core, identity, UsageScope.UNKNOWN)
    second = registry.upsert(core, identity, UsageScope.REQUIRED)

    assert first is second
    assert len(registry) == 1
    assert registry.get(identity).scope is UsageScope.REQUIRED
    assert registry.get(identity).bom_ref == identity


def test_first_seen_metadata_wins(core: Artifact) -> None:
    registry = ComponentRegistry()
    relabeled = Artifact(group="org.renamed", name="other", version="9", scope="runtime")

    registry.upsert(core, "id", UsageScope.OPTIONAL)
    registry.upsert(relabeled, "id", UsageScope.OPTIONAL)

    component = registry.get("id")
    assert component.group == "org.acme"
    assert component.name == "core"
    assert component.version == "2.1.0"


def test_populate_deduplicates_occurrences(core: Artifact, util: Artifact) -> None:
    registry = ComponentRegistry()
    report = UsageReport.of(used_declared=[core])

    registered = registry.populate([core, util, core, util, core], usage_report=report)

    assert registered == 5
    assert list(registry) == [generate_package_url(core), generate_package_url(util)]
    stats = registry.get_registry_statistics()
    assert stats["components_created"] == 2
    assert stats["occurrences_seen"] == 5
    assert stats["duplicates_merged"] == 3


def test_unknown_then_required_gives_one_required_component(core: Artifact) -> None:
    registry = ComponentRegistry()
    twin = Artifact(group=core.group, name=core.name, version=core.version, scope="runtime")

    registry.populate([core], usage_report=None)
    registry.populate([twin], usage_report=UsageReport.of(used_declared=[twin]))

    assert len(registry) == 1
    assert registry.values()[0].scope is UsageScope.REQUIRED


def test_populate_skips_artifacts_without_identity(core: Artifact, util: Artifact) -> None:
    registry = ComponentRegistry()
    known = {generate_package_url(core): "core-identity"}

    registry.populate([core, util], purl_to_identity=known)

    assert list(registry) == ["core-identity"]
    assert registry.get_registry_statistics()["artifacts_skipped"] == 1


def test_injected_purl_function_defines_identity(core: Artifact) -> None:
    converter = ModelConverter(purl_function=lambda a: f"{a.group}:{a.name}")
    registry = ComponentRegistry(converter=converter)

    registry.populate([core])

    assert "org.acme:core" in registry
    assert registry.get("org.acme:core").purl == "org.acme:core"


def test_remove_returns_component(core: Artifact) -> None:
    registry = ComponentRegistry()
    registry.upsert(core, "id", UsageScope.UNKNOWN)

    removed = registry.remove("id")

    assert removed is not None
    assert "id" not in registry
    assert registry.remove("id") is None


def test_graph_unions_targets_in_insertion_order() -> None:
    graph = DependencyGraphBuilder()
    graph.add_edges("a", ["b", "c"])
    graph.add_edges("a", ["c", "d"])
    graph.add_edges("b", [])

    assert graph.as_dict() == {"a": ["b", "c", "d"], "b": []}
    assert graph.edge_count == 3


def test_graph_merge_is_idempotent() -> None:
    graph = DependencyGraphBuilder()
    module_edges = {"a": ["b"], "b": ["c"]}

    graph.merge(module_edges)
    graph.merge(module_edges)

    assert graph.as_dict() == {"a": ["b"], "b": ["c"]}
    assert graph.get_graph_statistics()["edges_added"] == 2


def test_graph_keeps_self_edges() -> None:
    graph = DependencyGraphBuilder()
    graph.add_edges("a", ["a"])

    assert graph.depends_on("a") == ["a"]
