"""Tests for provider descriptors and the session catalog."""

import pytest
from pydantic import ValidationError

from scribefix.core.providers import (
    CLAUDE_CLI_PROVIDER_ID,
    CUSTOM_PROVIDER_ID,
    DEFAULT_PROVIDERS,
    Provider,
    ProviderCatalog,
    ProviderKind,
)


class TestProvider:
    def test_is_immutable(self):
        provider = DEFAULT_PROVIDERS[0]
        with pytest.raises(ValidationError):
            provider.label = "Changed"

    def test_with_base_url_returns_copy(self):
        custom = ProviderCatalog.default().get(CUSTOM_PROVIDER_ID)
        updated = custom.with_base_url("http://example.test/v1")
        assert updated.base_url == "http://example.test/v1"
        assert custom.base_url == "http://localhost:11434/v1"

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError):
            Provider(id="  ", label="Nope", kind=ProviderKind.HOSTED_API)

    def test_kind_parsed_from_string(self):
        provider = Provider(id="x", label="X", kind="local_process", command="x")
        assert provider.kind == ProviderKind.LOCAL_PROCESS


class TestDefaultCatalog:
    def test_order_and_lookup(self):
        catalog = ProviderCatalog.default()
        assert catalog.first().id == "openai"
        assert catalog.ids()[-1] == CUSTOM_PROVIDER_ID
        assert catalog.get("anthropic").label == "Anthropic"
        assert catalog.get("missing") is None
        assert "groq" in catalog
        assert len(catalog) == len(DEFAULT_PROVIDERS)

    def test_cli_provider_has_fixed_models(self):
        cli = ProviderCatalog.default().get(CLAUDE_CLI_PROVIDER_ID)
        assert cli.kind == ProviderKind.LOCAL_PROCESS
        assert cli.command == "claude"
        assert [m.value for m in cli.fixed_models] == ["haiku", "sonnet", "opus"]
        assert cli.default_model == "haiku"

    def test_empty_catalog_rejected(self):
        with pytest.raises(ValueError):
            ProviderCatalog([])

    def test_duplicate_ids_rejected(self):
        provider = DEFAULT_PROVIDERS[0]
        with pytest.raises(ValueError, match="unique"):
            ProviderCatalog([provider, provider])


class TestCatalogFromConfig:
    def test_none_uses_builtin_catalog(self):
        assert ProviderCatalog.from_config(None).ids() == ProviderCatalog.default().ids()

    def test_valid_config(self):
        catalog = ProviderCatalog.from_config(
            [
                {"id": "local", "label": "Local", "kind": "custom", "base_url": "http://h/v1"},
                {"id": "cli", "label": "CLI", "kind": "local_process", "command": "mycli"},
            ]
        )
        assert catalog.ids() == ["local", "cli"]
        assert catalog.get("cli").command == "mycli"

    @pytest.mark.parametrize(
        "data",
        [
            [],
            "not a list",
            [{"id": "x"}],
            [{"id": "x", "label": "X", "kind": "teleport"}],
            [
                {"id": "x", "label": "X", "kind": "custom"},
                {"id": "x", "label": "Y", "kind": "custom"},
            ],
        ],
    )
    def test_malformed_config_falls_back_to_single_provider(self, data):
        catalog = ProviderCatalog.from_config(data)
        assert len(catalog) == 1
        assert catalog.first().id == "openai"
