"""Chain Client - wallet-backed blockchain session with an optional endpoint probe.

Invariants:
    - connect() returns a client only when the hotkey keyfile was read and, if probing
      is enabled, the RPC endpoint answered system_health
    - account_id() returns the keyfile's ss58Address untouched; validation is the
      identity layer's job
    - No retries here: a failed probe fails connect()

Design Decisions:
    - Keyfile is the bittensor wallet layout: <wallet_path>/<wallet>/hotkeys/<hotkey>,
      JSON with an "ss58Address" field
    - ws:// and wss:// endpoints probed over http(s) JSON-RPC on the same host/port:
      substrate nodes serve both on one socket
    - httpx.AsyncClient per probe: the client session needs no persistent connection
"""

import json
import logging
from pathlib import Path

import httpx

from validator.config import get_settings
from validator.core.domain_types import AccountId
from validator.core.validator_config import BittensorConfig

logger = logging.getLogger(__name__)


class ChainClientError(Exception):
    """Chain client could not be constructed."""


def _http_endpoint(endpoint: str) -> str:
    if endpoint.startswith("wss://"):
        return "https://" + endpoint[len("wss://"):]
    if endpoint.startswith("ws://"):
        return "http://" + endpoint[len("ws://"):]
    return endpoint


def read_hotkey_address(keyfile: Path) -> str:
    """Return the ss58Address stored in an unencrypted hotkey keyfile."""
    try:
        raw = keyfile.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ChainClientError(f"hotkey file not found: {keyfile}") from e
    except OSError as e:
        raise ChainClientError(f"cannot read hotkey file {keyfile}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ChainClientError(
            f"hotkey file {keyfile} is not JSON (encrypted keyfiles are not supported)",
        ) from e
    address = data.get("ss58Address") if isinstance(data, dict) else None
    if not isinstance(address, str):
        raise ChainClientError(f"hotkey file {keyfile} has no ss58Address")
    return address


class BittensorChainClient:
    """Live client session: network parameters plus the wallet's hotkey account."""

    def __init__(self, params: BittensorConfig, address: str, endpoint: str | None):
        self.params = params
        self.endpoint = endpoint
        self._address = address

    @classmethod
    async def connect(
        cls, params: BittensorConfig, timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "BittensorChainClient":
        address = read_hotkey_address(params.hotkey_file())
        endpoint = params.resolved_endpoint()
        if endpoint is None:
            raise ChainClientError(f"no endpoint known for network '{params.network}'")
        if params.probe_endpoint:
            await cls._probe(endpoint, timeout_seconds, transport)
        logger.info(
            f"Chain client ready on {params.network} ({endpoint})",
            extra={"network": params.network, "netuid": params.netuid},
        )
        return cls(params, address, endpoint)

    @staticmethod
    async def _probe(
        endpoint: str, timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None,
    ) -> None:
        """JSON-RPC system_health round-trip."""
        payload = {"jsonrpc": "2.0", "id": 1, "method": "system_health", "params": []}
        try:
            async with httpx.AsyncClient(
                timeout=timeout_seconds, transport=transport,
            ) as client:
                response = await client.post(_http_endpoint(endpoint), json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            raise ChainClientError(f"endpoint {endpoint} unreachable: {e}") from e
        except ValueError as e:
            raise ChainClientError(f"endpoint {endpoint} returned invalid JSON") from e
        if "error" in body:
            raise ChainClientError(f"endpoint {endpoint} error: {body['error']}")

    def account_id(self) -> AccountId:
        return AccountId(self._address)


async def connect_chain_client(params: BittensorConfig) -> BittensorChainClient:
    """ChainClientFactory used by the session bootstrapper."""
    return await BittensorChainClient.connect(
        params, timeout_seconds=get_settings().chain_probe_timeout_seconds,
    )
