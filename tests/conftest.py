"""
Pytest configuration.

Qt runs headless, and fake command-line tools are generated per test so the
local process backend can be exercised without a real CLI installed.
"""

import os
import stat

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
# Use litellm's bundled model cost map so importing it never hits the network
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

from scribefix.core.providers import Provider, ProviderCatalog, ProviderKind
from scribefix.core.settings import PostProcessConfig, Settings, SettingsStateStore

# Echoes whatever follows the "Text:" line of the -p argument, prefixed with "OK: "
ECHO_SCRIPT = """#!/bin/sh
if [ "$1" = "--version" ]; then
  echo "fake-cli 1.0.0"
  exit 0
fi
prompt=""
while [ $# -gt 0 ]; do
  if [ "$1" = "-p" ]; then
    shift
    prompt="$1"
  fi
  shift
done
text=$(printf '%s\\n' "$prompt" | sed -n '/^Text:$/,$p' | sed '1d')
printf 'OK: %s\\n' "$text"
"""

ARGS_SCRIPT = """#!/bin/sh
for arg in "$@"; do
  printf '[%s]\\n' "$arg"
done
"""

FAILING_SCRIPT = """#!/bin/sh
echo "model overloaded" >&2
exit 3
"""

EMPTY_SCRIPT = """#!/bin/sh
printf '   \\n'
exit 0
"""

SLEEPING_SCRIPT = """#!/bin/sh
exec sleep 5
"""


@pytest.fixture
def make_script(tmp_path):
    def _make(body: str, name: str = "fake-cli") -> str:
        path = tmp_path / name
        path.write_text(body)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)

    return _make


@pytest.fixture
def local_provider():
    def _build(command: str, **kwargs) -> Provider:
        fields = {
            "id": "claude_cli",
            "label": "Claude Code CLI",
            "kind": ProviderKind.LOCAL_PROCESS,
            "command": command,
        }
        fields.update(kwargs)
        return Provider(**fields)

    return _build


@pytest.fixture
def catalog():
    return ProviderCatalog.default()


@pytest.fixture
def settings(catalog):
    return Settings.from_config(PostProcessConfig(), catalog)


@pytest.fixture
def store(settings):
    store = SettingsStateStore(settings)
    yield store
    store.close()


@pytest.fixture
def echo_cli(make_script):
    return make_script(ECHO_SCRIPT, "echo-cli")


@pytest.fixture
def args_cli(make_script):
    return make_script(ARGS_SCRIPT, "args-cli")


@pytest.fixture
def failing_cli(make_script):
    return make_script(FAILING_SCRIPT, "failing-cli")


@pytest.fixture
def empty_cli(make_script):
    return make_script(EMPTY_SCRIPT, "empty-cli")


@pytest.fixture
def sleeping_cli(make_script):
    return make_script(SLEEPING_SCRIPT, "sleeping-cli")


@pytest.fixture
def missing_cli(tmp_path):
    return str(tmp_path / "definitely-not-installed")
