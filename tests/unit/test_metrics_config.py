import pytest

from graphql_batching import metrics_config


@pytest.fixture
def disabled_metrics(monkeypatch):
    """Fixture to ensure metrics are in disabled state for testing."""
    monkeypatch.setattr(metrics_config, "METRICS_ENABLED", False)
    monkeypatch.setattr(metrics_config, "meter", None)
    monkeypatch.setattr(metrics_config, "requests_counter", None)
    monkeypatch.setattr(metrics_config, "operations_counter", None)
    monkeypatch.setattr(metrics_config, "batch_size_histogram", None)
    monkeypatch.setattr(metrics_config, "prometheus_reader", None)


@pytest.fixture
def mock_otel(monkeypatch, mocker):
    """Mocks the meter and instruments for testing enabled state."""
    monkeypatch.setattr(metrics_config, "METRICS_ENABLED", True)

    mock_metrics_module = mocker.Mock()
    mock_meter = mocker.Mock()
    mock_metrics_module.get_meter.return_value = mock_meter
    monkeypatch.setattr(metrics_config, "metrics", mock_metrics_module)
    monkeypatch.setattr(metrics_config, "meter", mock_meter)

    monkeypatch.setattr("graphql_batching.metrics_config.MeterProvider", mocker.Mock())
    monkeypatch.setattr("graphql_batching.metrics_config.PrometheusMetricReader", mocker.Mock())
    monkeypatch.setattr(
        "graphql_batching.metrics_config.generate_latest", mocker.Mock(return_value=b"prometheus_data")
    )
    monkeypatch.setattr("graphql_batching.metrics_config.CONTENT_TYPE_LATEST", "text/prometheus")

    instruments = {
        "requests_counter": mocker.Mock(),
        "operations_counter": mocker.Mock(),
        "batch_size_histogram": mocker.Mock(),
    }
    for name, instrument in instruments.items():
        monkeypatch.setattr(metrics_config, name, instrument)
    monkeypatch.setattr(metrics_config, "prometheus_reader", mocker.Mock())

    yield instruments


# --- Tests for Disabled State ---


def test_recording_is_noop_when_disabled(disabled_metrics):
    """Recording functions do nothing without an initialized meter."""
    metrics_config.record_batch(3, "completed")
    metrics_config.record_operation("query", "success")

    assert not metrics_config.is_metrics_enabled()


def test_export_when_disabled(disabled_metrics):
    content, media_type = metrics_config.get_metrics_export()

    assert content == "# Metrics not available\n"
    assert media_type == "text/plain"


def test_initialize_metrics_when_disabled(disabled_metrics, mocker):
    reader = mocker.patch("graphql_batching.metrics_config.PrometheusMetricReader")

    metrics_config.initialize_metrics()

    reader.assert_not_called()
    assert metrics_config.meter is None


def test_ensure_initialized_skips_tests(monkeypatch, mocker):
    monkeypatch.setattr(metrics_config, "_metrics_initialized", False)
    initialize = mocker.patch("graphql_batching.metrics_config.initialize_metrics")

    metrics_config.ensure_metrics_initialized(enabled=True)

    initialize.assert_not_called()
    assert metrics_config._metrics_initialized is True


# --- Tests for Enabled State ---


def test_record_batch(mock_otel):
    metrics_config.record_batch(4, "completed")

    mock_otel["requests_counter"].add.assert_called_once()
    assert mock_otel["requests_counter"].add.call_args[0][1]["outcome"] == "completed"
    mock_otel["batch_size_histogram"].record.assert_called_once()
    assert mock_otel["batch_size_histogram"].record.call_args[0][0] == 4


def test_rejected_empty_batch_is_not_sized(mock_otel):
    metrics_config.record_batch(0, "rejected")

    mock_otel["requests_counter"].add.assert_called_once()
    mock_otel["batch_size_histogram"].record.assert_not_called()


def test_record_operation(mock_otel):
    metrics_config.record_operation("mutation", "success")

    labels = mock_otel["operations_counter"].add.call_args[0][1]
    assert labels["kind"] == "mutation"
    assert labels["status"] == "success"


def test_export_when_enabled(mock_otel):
    assert metrics_config.get_metrics_export() == ("prometheus_data", "text/prometheus")


def test_initialize_creates_instruments(mock_otel):
    metrics_config.initialize_metrics()

    meter = metrics_config.metrics.get_meter.return_value
    names = [call[1]["name"] for call in meter.create_counter.call_args_list]
    assert names == ["graphql_batch_requests_total", "graphql_operations_total"]
    assert meter.create_histogram.call_args[1]["name"] == "graphql_batch_size"


def test_shutdown_metrics_resets_state(mock_otel, monkeypatch):
    reader = metrics_config.prometheus_reader
    monkeypatch.setattr(metrics_config, "_metrics_initialized", True)

    metrics_config.shutdown_metrics()

    reader.shutdown.assert_called_once()
    assert metrics_config.prometheus_reader is None
    assert not metrics_config.is_metrics_enabled()
    assert metrics_config._metrics_initialized is False


def test_shutdown_metrics_without_reader(disabled_metrics):
    metrics_config.shutdown_metrics()

    assert metrics_config.prometheus_reader is None
