"""End-to-end tests for the webhook endpoint."""

import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient
from unittest.mock import patch

from rice_calculator.adapters.ingress.favro_ingress import FavroIngressAdapter
from rice_calculator.config import ConfigurationError
from rice_calculator.infrastructure.di import DIContainer, set_container
from rice_calculator.main import app, cli


@pytest.fixture
def client(calculator_config, mock_publisher):
    """TestClient with a container wired to the mock publisher."""
    set_container(DIContainer(config=calculator_config, publisher=mock_publisher))
    try:
        yield TestClient(app)
    finally:
        set_container(None)


@pytest.fixture
def post_webhook(client, calculator_config):
    """POST a webhook signed the way Favro signs it."""
    ingress = FavroIngressAdapter(calculator_config)

    def post(action: str, card: dict, payload_id: str = "payload-1", signature: str = None):
        headers = {"X-Favro-Webhook": ingress.sign(payload_id) if signature is None else signature}
        body = {"payloadId": payload_id, "action": action, "card": card}
        return client.post("/calculator", json=body, headers=headers)

    return post


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_updated_card_publishes_score(post_webhook, card_payload, mock_publisher):
    response = post_webhook("updated", card_payload(reach=5, impact=8, confidence=10, effort=3))

    assert response.status_code == 200
    assert response.content == b""
    mock_publisher.publish.assert_awaited_once_with("card-1", 5 * 8 * 10 / 3)


def test_unchanged_score_is_not_published(post_webhook, card_payload, mock_publisher):
    card = card_payload(reach=5, impact=8, confidence=10, effort=3, score=5 * 8 * 10 / 3)

    response = post_webhook("updated", card)

    assert response.status_code == 200
    mock_publisher.publish.assert_not_awaited()


@pytest.mark.parametrize("action", ["committed", "moved"])
def test_other_relevant_actions(post_webhook, card_payload, mock_publisher, action):
    response = post_webhook(action, card_payload())

    assert response.status_code == 200
    mock_publisher.publish.assert_awaited_once()


def test_irrelevant_action_is_acknowledged(post_webhook, card_payload, mock_publisher):
    response = post_webhook("archived", card_payload())

    assert response.status_code == 200
    mock_publisher.publish.assert_not_awaited()


@pytest.mark.parametrize("action", ["updated", "archived"])
def test_invalid_signature_is_forbidden(post_webhook, card_payload, mock_publisher, action):
    response = post_webhook(action, card_payload(), signature="bm90LWEtc2lnbmF0dXJl")

    assert response.status_code == 403
    assert response.content == b""
    mock_publisher.publish.assert_not_awaited()


def test_missing_signature_header_is_forbidden(client, card_payload, mock_publisher):
    body = {"payloadId": "payload-1", "action": "updated", "card": card_payload()}

    response = client.post("/calculator", json=body)

    assert response.status_code == 403
    mock_publisher.publish.assert_not_awaited()


def test_malformed_body_is_forbidden(client, calculator_config, mock_publisher):
    headers = {"X-Favro-Webhook": FavroIngressAdapter(calculator_config).sign("payload-1")}

    response = client.post(
        "/calculator",
        content=b"not json",
        headers={**headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 403
    mock_publisher.publish.assert_not_awaited()


def test_verified_event_without_card(client, calculator_config, mock_publisher):
    headers = {"X-Favro-Webhook": FavroIngressAdapter(calculator_config).sign("payload-1")}

    response = client.post(
        "/calculator", json={"payloadId": "payload-1", "action": "updated"}, headers=headers
    )

    assert response.status_code == 200
    mock_publisher.publish.assert_not_awaited()


def test_missing_input_is_acknowledged(post_webhook, card_payload, mock_publisher):
    response = post_webhook("updated", card_payload(confidence=None))

    assert response.status_code == 200
    mock_publisher.publish.assert_not_awaited()


class TestCli:
    """Tests for the click CLI."""

    def test_check_config_ok(self, calculator_config):
        with patch("rice_calculator.main.build_calculator_config", return_value=calculator_config):
            result = CliRunner().invoke(cli, ["check-config"])

        assert result.exit_code == 0
        assert "Configuration OK" in result.output
        assert "port 8443" in result.output

    def test_check_config_invalid_exits_nonzero(self):
        error = ConfigurationError(["The server address has not been set."])
        with patch("rice_calculator.main.build_calculator_config", side_effect=error):
            result = CliRunner().invoke(cli, ["check-config"])

        assert result.exit_code == 1
        assert "Configuration OK" not in result.output

    def test_serve_runs_uvicorn_on_webhook_port(self, calculator_config):
        with patch("rice_calculator.main.build_calculator_config", return_value=calculator_config), \
                patch("uvicorn.run") as mock_run:
            result = CliRunner().invoke(cli, ["serve", "--host", "127.0.0.1"])

        set_container(None)
        assert result.exit_code == 0
        mock_run.assert_called_once_with(app, host="127.0.0.1", port=8443)
