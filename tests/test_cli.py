"""Tests for the doclock command-line interface"""

import json
import logging
from unittest.mock import AsyncMock, patch

import pytest

from doclock.cli.main import main, run_command
from doclock.cli.parser import parse_arguments
from doclock.core.config import DocLockConfig, LockConfig, OwnerMode, StoreConfig
from doclock.core.constants import ENV_VAR_MAPPING
from doclock.core.exceptions import StoreError
from doclock.core.locks import InMemoryDocumentStore


@pytest.fixture
def shared_store():
    """One in-memory store reused by every CLI invocation in a test"""
    store = InMemoryDocumentStore()
    with patch("doclock.cli.main.create_document_store", return_value=store):
        yield store


@pytest.fixture
def config():
    return DocLockConfig(store=StoreConfig(backend="memory"), lock=LockConfig(index="cli-locks"))


async def _run(argv, config):
    return await run_command(parse_arguments(argv), config)


class TestParser:
    def test_global_options_before_command(self):
        args = parse_arguments(["--index", "jobs", "--log-level", "debug", "acquire", "r1", "--owner", "w1"])
        assert args.index == "jobs"
        assert args.log_level == "DEBUG"
        assert args.command == "acquire"
        assert args.resource == "r1"
        assert args.owner == "w1"

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            parse_arguments([])

    def test_unknown_store_rejected(self):
        with pytest.raises(SystemExit):
            parse_arguments(["--store", "redis", "list"])


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_acquire_then_contention(self, shared_store, config, capsys):
        assert await _run(["acquire", "r1", "--owner", "w1"], config) == 0
        assert await _run(["acquire", "r1", "--owner", "w2"], config) == 1

        out = capsys.readouterr().out
        assert "Acquired lock on 'r1'" in out
        assert "Lock on 'r1' is already held" in out

    @pytest.mark.asyncio
    async def test_release_and_double_release(self, shared_store, config, capsys):
        await _run(["acquire", "r1", "--owner", "w1"], config)

        assert await _run(["release", "r1", "--owner", "w1"], config) == 0
        assert await _run(["release", "r1", "--owner", "w1"], config) == 1
        assert "No lock held for resource 'r1'" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_missing_owner_is_an_error(self, shared_store, config, capsys):
        assert await _run(["acquire", "r1"], config) == 2
        assert "Owner must be a non-empty string" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_owner_from_config(self, shared_store, capsys):
        config = DocLockConfig(lock=LockConfig(index="cli-locks", owner="from-env"))
        assert await _run(["acquire", "r1"], config) == 0
        assert await _run(["status", "r1"], config) == 0
        assert "r1: locked by from-env" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_bound_mode_without_owner_is_configuration_error(self, shared_store, capsys):
        config = DocLockConfig(lock=LockConfig(owner_mode=OwnerMode.BOUND))
        assert await _run(["list"], config) == 2
        assert "Owner-bound lock manager requires a non-empty owner" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_status_unlocked(self, shared_store, config, capsys):
        assert await _run(["status", "r1"], config) == 0
        assert "r1: unlocked" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_status_store_failure_reports_locked(self, config, capsys):
        store = InMemoryDocumentStore()
        store.get = AsyncMock(side_effect=StoreError("Document store request failed", operation="get"))
        with patch("doclock.cli.main.create_document_store", return_value=store):
            assert await _run(["status", "r1"], config) == 2
        assert "r1: locked (state unknown" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_list_without_namespace(self, shared_store, config, capsys):
        assert await _run(["list"], config) == 0
        assert await _run(["list", "--json"], config) == 0
        out = capsys.readouterr().out.splitlines()
        assert out == ["No lock namespace 'cli-locks'", "null"]

    @pytest.mark.asyncio
    async def test_list_locks(self, shared_store, config, capsys):
        await _run(["acquire", "r2", "--owner", "b"], config)
        await _run(["acquire", "r1", "--owner", "a"], config)
        capsys.readouterr()

        assert await _run(["list"], config) == 0
        assert capsys.readouterr().out.splitlines() == ["r1  a", "r2  b"]

        assert await _run(["list", "--json"], config) == 0
        assert json.loads(capsys.readouterr().out) == {"r1": {"owner": "a"}, "r2": {"owner": "b"}}

    @pytest.mark.asyncio
    async def test_list_empty_namespace(self, shared_store, config, capsys):
        await _run(["acquire", "r1", "--owner", "a"], config)
        await _run(["release", "r1", "--owner", "a"], config)
        capsys.readouterr()

        assert await _run(["list"], config) == 0
        assert "No locks held" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_reset_requires_confirmation(self, shared_store, config, capsys):
        await _run(["acquire", "r1", "--owner", "a"], config)

        assert await _run(["reset"], config) == 1
        assert await _run(["reset", "--yes"], config) == 0
        assert await _run(["reset", "--yes"], config) == 2

        captured = capsys.readouterr()
        assert "Refusing to delete lock namespace 'cli-locks' without --yes" in captured.out
        assert "Deleted lock namespace 'cli-locks'" in captured.out
        assert "Store error: Namespace does not exist - HTTP 404" in captured.err

    @pytest.mark.asyncio
    async def test_store_is_closed(self, config):
        store = InMemoryDocumentStore()
        store.close = AsyncMock()
        with patch("doclock.cli.main.create_document_store", return_value=store):
            await _run(["list"], config)
        store.close.assert_awaited_once()


class TestMain:
    @pytest.fixture(autouse=True)
    def quiet_logging(self):
        with patch("doclock.cli.main.setup_logging", return_value=logging.getLogger("doclock")) as setup:
            yield setup

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        monkeypatch.setattr("doclock.core.config._bootstrap_dotenv", lambda logger: None)
        for name in ENV_VAR_MAPPING.values():
            monkeypatch.delenv(name, raising=False)

    def test_main_exit_code(self, monkeypatch, capsys, quiet_logging):
        monkeypatch.setenv("DOCLOCK_STORE", "memory")
        with pytest.raises(SystemExit) as exc_info:
            main(["--index", "cli-locks", "acquire", "r1", "--owner", "w1"])
        assert exc_info.value.code == 0
        assert "Acquired lock on 'r1'" in capsys.readouterr().out
        assert quiet_logging.call_args.args[0].level == "INFO"

    def test_main_configuration_error(self, monkeypatch, capsys):
        monkeypatch.setenv("DOCLOCK_MAX_RETRIES", "many")
        with pytest.raises(SystemExit) as exc_info:
            main(["list"])
        assert exc_info.value.code == 2
        assert "Configuration error" in capsys.readouterr().err
