"""Tests for model list fetching and merging."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from scribefix.core.providers import ProviderCatalog
from scribefix.core.transcript_processor import (
    ModelCatalogCache,
    merge_model_options,
    parse_models_response,
)


def _json_response(payload, status=200):
    response = MagicMock()
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


class TestMergeModelOptions:
    def test_current_already_fetched(self):
        assert merge_model_options(["a", "b"], "b") == ["a", "b"]

    def test_current_appended_when_novel(self):
        assert merge_model_options(["a", "b"], "c") == ["a", "b", "c"]

    def test_dedup_preserves_first_seen_order(self):
        assert merge_model_options(["b", "a", "b", " a "], "a") == ["b", "a"]

    def test_blank_entries_dropped(self):
        assert merge_model_options(["", "  ", "x"], "") == ["x"]
        assert merge_model_options([], None) == []

    def test_only_current(self):
        assert merge_model_options([], "gpt-4o") == ["gpt-4o"]


class TestParseModelsResponse:
    def test_openai_shape(self):
        payload = {"object": "list", "data": [{"id": "gpt-4o"}, {"id": "gpt-4o-mini"}]}
        assert parse_models_response(payload) == ["gpt-4o", "gpt-4o-mini"]

    def test_models_key_with_names(self):
        assert parse_models_response({"models": [{"name": "llama3"}, "qwen"]}) == [
            "llama3",
            "qwen",
        ]

    def test_bare_list(self):
        assert parse_models_response(["a", {"id": "b"}, 42]) == ["a", "b"]

    def test_unknown_shape_raises(self):
        with pytest.raises(ValueError):
            parse_models_response({"error": "nope"})


class TestModelCatalogCache:
    def test_fixed_catalog_needs_no_network(self):
        cli = ProviderCatalog.default().get("claude_cli")
        cache = ModelCatalogCache()
        with patch("scribefix.core.transcript_processor.model_catalog.requests.get") as mock_get:
            assert cache.fetch_models(cli) == ["haiku", "sonnet", "opus"]
        mock_get.assert_not_called()

    def test_on_device_has_no_models(self):
        apple = ProviderCatalog.default().get("apple_intelligence")
        with patch("scribefix.core.transcript_processor.model_catalog.requests.get") as mock_get:
            assert ModelCatalogCache().fetch_models(apple) == []
        mock_get.assert_not_called()

    @patch("scribefix.core.transcript_processor.model_catalog.requests.get")
    def test_fetch_uses_bearer_token(self, mock_get):
        mock_get.return_value = _json_response({"data": [{"id": "m1"}, {"id": "m2"}]})
        openai = ProviderCatalog.default().get("openai")

        models = ModelCatalogCache(timeout=7).fetch_models(openai, api_key="sk-1")

        assert models == ["m1", "m2"]
        args, kwargs = mock_get.call_args
        assert args[0] == "https://api.openai.com/v1/models"
        assert kwargs["headers"]["Authorization"] == "Bearer sk-1"
        assert kwargs["timeout"] == 7

    @patch("scribefix.core.transcript_processor.model_catalog.requests.get")
    def test_anthropic_headers(self, mock_get):
        mock_get.return_value = _json_response({"data": [{"id": "claude-3-5-haiku"}]})
        anthropic = ProviderCatalog.default().get("anthropic")

        ModelCatalogCache().fetch_models(anthropic, api_key="ak")

        headers = mock_get.call_args.kwargs["headers"]
        assert headers["x-api-key"] == "ak"
        assert headers["anthropic-version"] == "2023-06-01"
        assert "Authorization" not in headers

    @patch("scribefix.core.transcript_processor.model_catalog.requests.get")
    def test_custom_base_url_trailing_slash(self, mock_get):
        mock_get.return_value = _json_response([])
        custom = ProviderCatalog.default().get("custom").with_base_url("http://box:1234/v1/")

        ModelCatalogCache().fetch_models(custom)

        assert mock_get.call_args.args[0] == "http://box:1234/v1/models"
        assert "Authorization" not in mock_get.call_args.kwargs["headers"]

    @pytest.mark.parametrize(
        "side_effect",
        [requests.ConnectionError("down"), requests.Timeout("slow")],
    )
    def test_transport_failure_returns_empty(self, side_effect):
        openai = ProviderCatalog.default().get("openai")
        with patch(
            "scribefix.core.transcript_processor.model_catalog.requests.get",
            side_effect=side_effect,
        ):
            assert ModelCatalogCache().fetch_models(openai, api_key="k") == []

    @patch("scribefix.core.transcript_processor.model_catalog.requests.get")
    def test_http_error_returns_empty(self, mock_get):
        mock_get.return_value = _json_response({}, status=401)
        openai = ProviderCatalog.default().get("openai")
        assert ModelCatalogCache().fetch_models(openai, api_key="bad") == []

    @patch("scribefix.core.transcript_processor.model_catalog.requests.get")
    def test_malformed_body_returns_empty(self, mock_get):
        mock_get.return_value = _json_response({"unexpected": True})
        openai = ProviderCatalog.default().get("openai")
        assert ModelCatalogCache().fetch_models(openai, api_key="k") == []
