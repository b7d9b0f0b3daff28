from pytest_archon import archrule


def test_translation_core_independent_of_adapters() -> None:
    """
    Keys, schema, query compilation and record shaping must not know about
    concrete stores or the connector that drives them.
    """
    for module in ("keys", "schema", "query", "records", "ports"):
        (
            archrule(f"{module}_is_store_agnostic")
            .match(f"datastore_connector.{module}")
            .should_not_import("datastore_connector.adapters*")
            .should_not_import("datastore_connector.connector")
            .should_not_import("motor*")
            .check("datastore_connector")
        )


def test_connector_depends_on_ports_only() -> None:
    """
    The connector talks to stores through IDocumentStore, never to an adapter.
    """
    (
        archrule("connector_uses_ports")
        .match("datastore_connector.connector")
        .should_not_import("datastore_connector.adapters*")
        .should_not_import("motor*")
        .check("datastore_connector")
    )


def test_memory_adapter_has_no_driver_dependency() -> None:
    """
    The in-memory store must stay usable without a MongoDB driver installed.
    """
    (
        archrule("memory_adapter_driver_free")
        .match("datastore_connector.adapters.memory")
        .should_not_import("motor*")
        .should_not_import("datastore_connector.adapters.mongo*")
        .check("datastore_connector")
    )
