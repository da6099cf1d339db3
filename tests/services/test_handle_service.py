"""Service Handlers - start/stop/status via pid file, gen-config template.

Tests cover:
    - start loads, validates, warns, writes then removes the pid file
    - local_test skips the chain connection; otherwise a failed connection aborts
    - a live pid blocks a second start
    - stop signals the recorded pid; stale pid files are cleaned up
    - gen-config writes a loadable template and refuses to overwrite
"""

import asyncio
import os
import signal

import pytest

from validator.config import Settings
from validator.core.errors import (
    ConfigInvalidError, ConfigRequiredError, ServiceError,
)
from validator.core.validator_config import ValidatorConfig
from validator.services.handle_service import ServiceHandlers, read_pid


@pytest.fixture
def settings(tmp_path):
    return Settings(pid_file=tmp_path / "run" / "validator.pid")


@pytest.fixture
def stopped():
    event = asyncio.Event()
    event.set()
    return event


@pytest.fixture
def service(settings, reporter, chain, stopped):
    return ServiceHandlers(settings, reporter, chain.factory, shutdown=stopped)


@pytest.mark.asyncio
async def test_start_local_test_runs_and_cleans_up(service, settings, reporter, calls, write_config):
    await service.start(write_config(), local_test=True)

    assert calls == []
    assert reporter.of("info") == ["Local test mode: skipping chain connection"]
    assert reporter.of("success")[0].startswith("Validator started on finney (netuid 3")
    assert not settings.pid_file.exists()


@pytest.mark.asyncio
async def test_start_connects_chain_when_not_local(service, calls, chain, write_config):
    await service.start(write_config(), local_test=False)
    assert [name for name, _ in calls] == ["chain.connect"]
    assert chain.params.netuid == 3


@pytest.mark.asyncio
async def test_start_chain_failure_aborts(service, settings, chain, write_config):
    chain.error = ConnectionError("no route")
    with pytest.raises(ServiceError, match="no route"):
        await service.start(write_config(), local_test=False)
    assert not settings.pid_file.exists()


@pytest.mark.asyncio
async def test_start_writes_pid_while_running(settings, reporter, chain, write_config):
    shutdown = asyncio.Event()
    service = ServiceHandlers(settings, reporter, chain.factory, shutdown=shutdown)
    task = asyncio.create_task(service.start(write_config(), local_test=True))
    for _ in range(100):
        if settings.pid_file.exists():
            break
        await asyncio.sleep(0.01)

    assert read_pid(settings.pid_file) == os.getpid()
    shutdown.set()
    await task
    assert not settings.pid_file.exists()


@pytest.mark.asyncio
async def test_start_requires_config(service):
    with pytest.raises(ConfigRequiredError):
        await service.start(None, local_test=True)


@pytest.mark.asyncio
async def test_start_rejects_invalid_config(service, write_config):
    with pytest.raises(ConfigInvalidError):
        await service.start(write_config("[emission]\nburn_percentage = 200.0\n"), True)


@pytest.mark.asyncio
async def test_start_reports_warnings(service, reporter, write_config):
    content = "[emission]\nburn_percentage = 90.0\n[database]\nurl = \"postgresql://x/y\"\n"
    await service.start(write_config(content), local_test=True)
    assert len(reporter.of("warning")) == 1


@pytest.mark.asyncio
async def test_start_refuses_when_already_running(service, settings, write_config):
    settings.pid_file.parent.mkdir(parents=True)
    settings.pid_file.write_text(str(os.getppid()))
    with pytest.raises(ServiceError, match="already running"):
        await service.start(write_config(), local_test=True)


@pytest.mark.asyncio
async def test_stop_when_not_running(service, reporter):
    await service.stop()
    assert reporter.of("info") == ["Validator is not running"]


@pytest.mark.asyncio
async def test_stop_signals_recorded_pid(service, settings, reporter, monkeypatch):
    sent = []
    monkeypatch.setattr(
        "validator.services.handle_service.os.kill", lambda pid, sig: sent.append((pid, sig)),
    )
    settings.pid_file.parent.mkdir(parents=True)
    settings.pid_file.write_text("4242")

    await service.stop()

    assert (4242, signal.SIGTERM) in sent
    assert reporter.of("success") == ["Sent stop signal to validator (pid 4242)"]


@pytest.mark.asyncio
async def test_stop_removes_stale_pid_file(service, settings, reporter, monkeypatch):
    def kill(pid, sig):
        raise ProcessLookupError

    monkeypatch.setattr("validator.services.handle_service.os.kill", kill)
    settings.pid_file.parent.mkdir(parents=True)
    settings.pid_file.write_text("4242")

    await service.stop()

    assert not settings.pid_file.exists()
    assert reporter.of("info") == ["Removed stale pid file (pid 4242)"]


@pytest.mark.asyncio
async def test_status_running_and_not_running(service, settings, reporter):
    await service.status()
    settings.pid_file.parent.mkdir(parents=True)
    settings.pid_file.write_text(str(os.getpid()))
    await service.status()
    assert reporter.of("info") == ["Validator is not running"]
    assert reporter.of("success") == [f"Validator is running (pid {os.getpid()})"]


@pytest.mark.asyncio
async def test_gen_config_writes_loadable_template(service, reporter, tmp_path):
    output = tmp_path / "conf" / "validator.toml"
    await service.gen_config(output)
    ValidatorConfig.from_toml(output).check()
    assert reporter.of("success") == [f"Configuration template written to {output}"]


@pytest.mark.asyncio
async def test_gen_config_refuses_overwrite(service, tmp_path):
    output = tmp_path / "validator.toml"
    output.write_text("keep me")
    with pytest.raises(ServiceError, match="overwrite"):
        await service.gen_config(output)
    assert output.read_text() == "keep me"
