"""Unit tests for the operation event dispatcher."""

from graphql_batching.events import GRAPHQL_MUTATION
from graphql_batching.events import GRAPHQL_QUERY
from graphql_batching.events import EventDispatcher
from graphql_batching.events import OperationEvent


def _event(**overrides):
    fields = {"schema_key": "default", "query": "{ ping }", "result": {"data": {"ping": "pong"}}}
    fields.update(overrides)
    return OperationEvent(**fields)


class TestOperationEvent:
    def test_defaults(self):
        event = _event()

        assert event.name is None
        assert event.context == {}
        assert event.variables == {}
        assert event.graphql_schema is None

    def test_schema_is_not_serialized(self):
        event = _event(graphql_schema=object())

        assert "graphql_schema" not in event.model_dump()


class TestEventDispatcher:
    """Test listener registration and delivery."""

    def test_trigger_delivers_to_listeners_of_that_name(self, mocker):
        dispatcher = EventDispatcher()
        on_query = mocker.Mock()
        on_mutation = mocker.Mock()
        dispatcher.subscribe(GRAPHQL_QUERY, on_query)
        dispatcher.subscribe(GRAPHQL_MUTATION, on_mutation)
        event = _event()

        dispatcher.trigger(GRAPHQL_QUERY, event)

        on_query.assert_called_once_with(event)
        on_mutation.assert_not_called()

    def test_listeners_run_in_subscription_order(self):
        dispatcher = EventDispatcher()
        calls = []
        dispatcher.subscribe(GRAPHQL_QUERY, lambda event: calls.append("first"))
        dispatcher.subscribe(GRAPHQL_QUERY, lambda event: calls.append("second"))

        dispatcher.trigger(GRAPHQL_QUERY, _event())

        assert calls == ["first", "second"]

    def test_trigger_without_listeners(self):
        EventDispatcher().trigger(GRAPHQL_MUTATION, _event())

    def test_unsubscribe(self, mocker):
        dispatcher = EventDispatcher()
        listener = mocker.Mock()
        dispatcher.subscribe(GRAPHQL_QUERY, listener)

        dispatcher.unsubscribe(GRAPHQL_QUERY, listener)
        dispatcher.unsubscribe(GRAPHQL_QUERY, listener)
        dispatcher.trigger(GRAPHQL_QUERY, _event())

        listener.assert_not_called()
        assert dispatcher.listeners(GRAPHQL_QUERY) == ()

    def test_failing_listener_is_logged_and_others_still_run(self, mocker):
        mock_log_error = mocker.patch("graphql_batching.events.log_structured_error")
        dispatcher = EventDispatcher()
        after = mocker.Mock()
        dispatcher.subscribe(GRAPHQL_QUERY, mocker.Mock(side_effect=RuntimeError("listener down")))
        dispatcher.subscribe(GRAPHQL_QUERY, after)

        dispatcher.trigger(GRAPHQL_QUERY, _event())

        after.assert_called_once()
        mock_log_error.assert_called_once()
        kwargs = mock_log_error.call_args[1]
        assert kwargs["operation"] == "event_dispatch"
        assert kwargs["event_name"] == GRAPHQL_QUERY
