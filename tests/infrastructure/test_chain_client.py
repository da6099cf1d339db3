"""Chain Client - keyfile reading and endpoint probe.

Tests cover:
    - ss58Address read from the wallet's hotkey file
    - Missing / non-JSON / incomplete keyfiles raise ChainClientError
    - Probe disabled: no HTTP at all; enabled: system_health over http(s)
    - RPC errors and HTTP failures raise ChainClientError
"""

import json

import httpx
import pytest

from validator.core.validator_config import BittensorConfig
from validator.infrastructure.chain_client import (
    BittensorChainClient, ChainClientError, read_hotkey_address,
)

from tests.helpers import ALICE


@pytest.fixture
def wallet(tmp_path):
    hotkeys = tmp_path / "validator" / "hotkeys"
    hotkeys.mkdir(parents=True)
    (hotkeys / "default").write_text(
        json.dumps({"accountId": "0xd435", "ss58Address": ALICE}), encoding="utf-8",
    )
    return tmp_path


def _params(wallet, **overrides) -> BittensorConfig:
    values = {"wallet_path": str(wallet), "probe_endpoint": False}
    values.update(overrides)
    return BittensorConfig(**values)


def _transport(handler):
    return httpx.MockTransport(handler)


def test_read_hotkey_address(wallet):
    assert read_hotkey_address(wallet / "validator" / "hotkeys" / "default") == ALICE


def test_read_missing_keyfile(tmp_path):
    with pytest.raises(ChainClientError, match="not found"):
        read_hotkey_address(tmp_path / "nope")


def test_read_encrypted_keyfile(tmp_path):
    path = tmp_path / "enc"
    path.write_bytes(b"$NACL\x00\x01binary")
    with pytest.raises(ChainClientError, match="not JSON"):
        read_hotkey_address(path)


def test_read_keyfile_without_address(tmp_path):
    path = tmp_path / "k"
    path.write_text(json.dumps({"publicKey": "0x00"}), encoding="utf-8")
    with pytest.raises(ChainClientError, match="ss58Address"):
        read_hotkey_address(path)


@pytest.mark.asyncio
async def test_connect_without_probe(wallet):
    def fail(request):
        raise AssertionError("no HTTP expected")

    client = await BittensorChainClient.connect(_params(wallet), transport=_transport(fail))
    assert client.account_id() == ALICE
    assert client.endpoint.startswith("wss://entrypoint-finney")


@pytest.mark.asyncio
async def test_connect_probes_system_health_over_http(wallet):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"peers": 4}})

    params = _params(wallet, probe_endpoint=True, network="local")
    await BittensorChainClient.connect(params, transport=_transport(handler))

    assert len(seen) == 1
    assert seen[0].url.scheme == "http"
    assert seen[0].url.host == "127.0.0.1"
    assert seen[0].url.port == 9944
    assert json.loads(seen[0].content)["method"] == "system_health"


@pytest.mark.asyncio
async def test_connect_rpc_error_fails(wallet):
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32601}})

    params = _params(wallet, probe_endpoint=True)
    with pytest.raises(ChainClientError, match="error"):
        await BittensorChainClient.connect(params, transport=_transport(handler))


@pytest.mark.asyncio
async def test_connect_http_failure_fails(wallet):
    def handler(request):
        return httpx.Response(503)

    params = _params(wallet, probe_endpoint=True)
    with pytest.raises(ChainClientError, match="unreachable"):
        await BittensorChainClient.connect(params, transport=_transport(handler))


@pytest.mark.asyncio
async def test_connect_missing_wallet_fails(tmp_path):
    with pytest.raises(ChainClientError):
        await BittensorChainClient.connect(_params(tmp_path))
