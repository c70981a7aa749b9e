"""Client for a Vultr-compatible v2 REST API managing benchmark instances."""

from __future__ import annotations

import ipaddress
import json
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable, Optional
from urllib.parse import urljoin

import requests

from .errors import (
    FailureResponseCode,
    RequestError,
    SshKeyNotFound,
    UnexpectedResponse,
)
from .instance import Instance, InstanceStatus, ServerProviderClient


def _json_text(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _field(data: Any, name: str, kind: type) -> Any:
    if not isinstance(data, dict):
        raise UnexpectedResponse(f"expected an object, found {_json_text(data)}")
    if name not in data:
        raise UnexpectedResponse(f"missing field `{name}`")
    value = data[name]
    if not isinstance(value, kind):
        raise UnexpectedResponse(f"invalid type for field `{name}`: {_json_text(value)}")
    return value


def _ipv4(text: str) -> ipaddress.IPv4Address:
    try:
        return ipaddress.IPv4Address(text)
    except ValueError as exc:
        raise UnexpectedResponse(f"invalid IPv4 address: {text}") from exc


def _string_list(data: Any, name: str) -> list[str]:
    values = _field(data, name, list)
    if not all(isinstance(v, str) for v in values):
        raise UnexpectedResponse(f"invalid type for field `{name}`")
    return list(values)


@dataclass(frozen=True)
class SshKey:
    """An SSH key registered with the provider."""

    id: str
    name: str

    @classmethod
    def _from_json(cls, data: Any) -> "SshKey":
        return cls(id=_field(data, "id", str), name=_field(data, "name", str))


@dataclass(frozen=True)
class VultrInstance:
    """An instance as described by the provider."""

    id: str
    region: str
    main_ip: ipaddress.IPv4Address
    tags: tuple[str, ...]
    plan: str
    power_status: str

    @classmethod
    def from_json(cls, data: Any) -> "VultrInstance":
        """Parse an instance object; raises UnexpectedResponse if malformed."""
        return cls(
            id=_field(data, "id", str),
            region=_field(data, "region", str),
            main_ip=_ipv4(_field(data, "main_ip", str)),
            tags=tuple(_string_list(data, "tags")),
            plan=_field(data, "plan", str),
            power_status=_field(data, "power_status", str),
        )

    def matches(self, regions: Iterable[str], testbed_id: str, specs: str) -> bool:
        """Whether the instance belongs to the testbed described by these settings."""
        return self.region in regions and testbed_id in self.tags and self.plan == specs

    def to_instance(self) -> Instance:
        return Instance(
            id=self.id,
            region=self.region,
            main_ip=self.main_ip,
            tags=self.tags,
            specs=self.plan,
            status=InstanceStatus.parse(self.power_status),
        )


def _instance_from_json(data: Any) -> Instance:
    status_text = _field(data, "status", str)
    try:
        status = InstanceStatus(status_text)
    except ValueError as exc:
        raise UnexpectedResponse(f"unknown variant `{status_text}`") from exc
    return Instance(
        id=_field(data, "id", str),
        region=_field(data, "region", str),
        main_ip=_ipv4(_field(data, "main_ip", str)),
        tags=tuple(_string_list(data, "tags")),
        specs=_field(data, "specs", str),
        status=status,
    )


class VultrClient(ServerProviderClient):
    """Manages testbed instances through the provider's v2 API."""

    USERNAME: ClassVar[str] = "root"
    DEFAULT_OS: ClassVar[int] = 1743  # Ubuntu 22.04 x64

    def __init__(
        self,
        token: str,
        base_url: str,
        regions: Iterable[str],
        testbed_id: str,
        specs: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._token = token
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.regions = list(regions)
        self.testbed_id = testbed_id
        self.specs = specs
        self._session = session if session is not None else requests.Session()

    def __str__(self) -> str:
        return "Vultr API client v2"

    def _request(self, method: str, path: str, body: Any = None) -> requests.Response:
        url = urljoin(self.base_url, path)
        headers = {"Authorization": f"Bearer {self._token}"}
        try:
            return self._session.request(method, url, headers=headers, json=body)
        except requests.RequestException as exc:
            raise RequestError(str(exc)) from exc

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            payload = response.json()
        except ValueError as exc:
            raise RequestError(f"error decoding response body: {exc}") from exc
        if isinstance(payload, dict) and "error" in payload:
            raise FailureResponseCode(
                _json_text(payload.get("status")), _json_text(payload["error"])
            )
        return payload

    @staticmethod
    def _check_status_code(response: requests.Response) -> None:
        if not 200 <= response.status_code < 300:
            status = f"{response.status_code} {response.reason or ''}".strip()
            raise FailureResponseCode(status, "[no body]")

    @staticmethod
    def _member(payload: Any, name: str) -> Any:
        return payload.get(name) if isinstance(payload, dict) else None

    def get_key(self) -> Optional[SshKey]:
        """Return the SSH key registered for this testbed, if any."""
        payload = self._json(self._request("GET", "ssh-keys"))
        content = self._member(payload, "ssh_keys")
        if not isinstance(content, list):
            raise UnexpectedResponse(f"expected a sequence, found {_json_text(content)}")
        keys = [SshKey._from_json(item) for item in content]
        return next((key for key in keys if key.name == self.testbed_id), None)

    def list_instances(self) -> list[Instance]:
        payload = self._json(self._request("GET", "instances"))
        content = self._member(payload, "instances")
        if not isinstance(content, list):
            raise UnexpectedResponse(f"expected a sequence, found {_json_text(content)}")
        instances = [VultrInstance.from_json(item) for item in content]
        return [
            vi.to_instance()
            for vi in instances
            if vi.matches(self.regions, self.testbed_id, self.specs)
        ]

    def _post_ids(self, path: str, instances: Iterable[Instance]) -> None:
        body = {"instance_ids": [instance.id for instance in instances]}
        self._check_status_code(self._request("POST", path, body))

    def start_instances(self, instances: Iterable[Instance]) -> None:
        self._post_ids("instances/start", instances)

    def stop_instances(self, instances: Iterable[Instance]) -> None:
        self._post_ids("instances/halt", instances)

    def create_instance(self, region: str) -> Instance:
        key = self.get_key()
        if key is None:
            raise SshKeyNotFound(self.testbed_id)
        body = {
            "region": region,
            "plan": self.specs,
            "os_id": self.DEFAULT_OS,
            "label": self.testbed_id,
            "sshkey_id": [key.id],
            "hostname": "validator",
            "tag": self.testbed_id,
        }
        payload = self._json(self._request("POST", "instances", body))
        return _instance_from_json(self._member(payload, "instance"))

    def delete_instance(self, instance: Instance) -> None:
        self._check_status_code(self._request("DELETE", f"instances/{instance.id}"))

    def register_ssh_public_key(self, public_key: str) -> None:
        # Do not upload the key if it already exists.
        if self.get_key() is not None:
            return
        body = {"name": self.testbed_id, "ssh_key": public_key}
        self._json(self._request("POST", "ssh-keys", body))

    def instance_setup_commands(self) -> list[str]:
        return ["sudo ufw disable"]