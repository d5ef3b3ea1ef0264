"""The pytest configuration for GraphQL batching gateway testing."""

import pytest

from graphql_batching import observability
from graphql_batching.config import reset_settings
from graphql_batching.engine import GraphQLQueryHandler
from graphql_batching.engine import PersistedQueryResolver
from graphql_batching.engine import SchemaRegistry
from graphql_batching.events import GRAPHQL_MUTATION
from graphql_batching.events import GRAPHQL_QUERY
from graphql_batching.events import EventDispatcher
from graphql_batching.gateway import GraphQLBatchGateway

from .shared.schema_fixtures import ROOT_VALUE
from .shared.schema_fixtures import SDL


@pytest.fixture(scope="session", autouse=True)
def disable_tracing_for_tests():
    """Keep OpenTelemetry span exporters out of the test run."""
    original_value = observability.OBSERVABILITY_ENABLED
    observability.OBSERVABILITY_ENABLED = False
    yield
    observability.OBSERVABILITY_ENABLED = original_value


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from GRAPHQL_BATCH_* variables and the settings singleton."""
    import os

    for key in list(os.environ):
        if key.startswith("GRAPHQL_BATCH_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def schema_registry():
    registry = SchemaRegistry()
    registry.register_sdl("default", SDL)
    return registry


@pytest.fixture
def schema(schema_registry):
    return schema_registry.build_by_name("default")


@pytest.fixture
def query_handler():
    return GraphQLQueryHandler(root_value=ROOT_VALUE)


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def recorded_events(dispatcher):
    """Collect (event_name, event) pairs published on the dispatcher."""
    events = []
    dispatcher.subscribe(GRAPHQL_QUERY, lambda event: events.append((GRAPHQL_QUERY, event)))
    dispatcher.subscribe(GRAPHQL_MUTATION, lambda event: events.append((GRAPHQL_MUTATION, event)))
    return events


@pytest.fixture
def persisted_resolver():
    return PersistedQueryResolver({"ping-id": "{ ping }"})


@pytest.fixture
def gateway_factory(schema_registry, query_handler, dispatcher, persisted_resolver):
    """Build gateways sharing the test schema, handler and dispatcher."""

    def _create(**kwargs):
        options = {
            "schema_key": "default",
            "query_handler": query_handler,
            "schema_provider": schema_registry,
            "query_resolver": persisted_resolver,
            "dispatcher": dispatcher,
        }
        options.update(kwargs)
        return GraphQLBatchGateway(**options)

    return _create


@pytest.fixture
def gateway(gateway_factory):
    return gateway_factory()
