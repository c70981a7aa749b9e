import ipaddress
import json

import pytest
import responses

from mysticeti.errors import (
    FailureResponseCode,
    RequestError,
    SshKeyNotFound,
    UnexpectedResponse,
)
from mysticeti.instance import Instance, InstanceStatus
from mysticeti.vultr import SshKey, VultrClient, VultrInstance

BASE = "https://api.example.com/v2/"


@pytest.fixture
def mock():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return VultrClient(
        token="token",
        base_url=BASE,
        regions=["ewr", "ams"],
        testbed_id="bench",
        specs="vc2-1c",
    )


def _vultr(id_, region="ewr", tags=("bench",), plan="vc2-1c", power="running"):
    return {
        "id": id_,
        "region": region,
        "main_ip": "10.0.0.1",
        "tags": list(tags),
        "plan": plan,
        "power_status": power,
    }


def test_vultr_instance_conversion():
    vi = VultrInstance.from_json(_vultr("x", power="stopped"))
    inst = vi.to_instance()
    assert inst.id == "x"
    assert inst.specs == "vc2-1c"
    assert inst.status is InstanceStatus.INACTIVE
    assert inst.main_ip == ipaddress.IPv4Address("10.0.0.1")


def test_vultr_instance_matches():
    vi = VultrInstance.from_json(_vultr("x"))
    assert vi.matches(["ewr"], "bench", "vc2-1c")
    assert not vi.matches(["ams"], "bench", "vc2-1c")
    assert not vi.matches(["ewr"], "other", "vc2-1c")
    assert not vi.matches(["ewr"], "bench", "big")


def test_vultr_instance_malformed():
    with pytest.raises(UnexpectedResponse):
        VultrInstance.from_json({"id": "x"})


def test_list_instances_filters(mock, client):
    mock.get(
        BASE + "instances",
        json={"instances": [_vultr("a"), _vultr("b", region="sgp"), _vultr("c", plan="big")]},
    )
    instances = client.list_instances()
    assert [i.id for i in instances] == ["a"]
    assert instances[0].is_active()
    assert mock.calls[0].request.headers["Authorization"] == "Bearer token"


def test_error_body_raises_failure(mock, client):
    mock.get(BASE + "instances", json={"error": "bad", "status": 400})
    with pytest.raises(FailureResponseCode) as info:
        client.list_instances()
    assert info.value.status == "400"
    assert info.value.message == '"bad"'


def test_non_json_body_is_request_error(mock, client):
    mock.get(BASE + "instances", body="not json")
    with pytest.raises(RequestError):
        client.list_instances()


def test_connection_failure_is_request_error(mock, client):
    mock.get(BASE + "instances", body=ConnectionError("refused"))
    with pytest.raises(RequestError):
        client.list_instances()


def test_missing_content_is_unexpected(mock, client):
    mock.get(BASE + "instances", json={})
    with pytest.raises(UnexpectedResponse):
        client.list_instances()


def test_start_instances_posts_ids(mock, client):
    mock.post(BASE + "instances/start", status=204)
    result = client.start_instances(
        [Instance("a", "ewr", "10.0.0.1"), Instance("b", "ewr", "10.0.0.2")]
    )
    assert result is None
    assert json.loads(mock.calls[0].request.body) == {"instance_ids": ["a", "b"]}


def test_start_instances_failure_status(mock, client):
    mock.post(BASE + "instances/start", status=403)
    with pytest.raises(FailureResponseCode) as info:
        client.start_instances([Instance("a", "ewr", "10.0.0.1")])
    assert info.value.status.startswith("403")


def test_stop_instances_failure_status(mock, client):
    mock.post(BASE + "instances/halt", status=500)
    with pytest.raises(FailureResponseCode) as info:
        client.stop_instances([Instance("a", "ewr", "10.0.0.1")])
    assert info.value.status.startswith("500")
    assert info.value.message == "[no body]"


def test_get_key(mock, client):
    mock.get(
        BASE + "ssh-keys",
        json={"ssh_keys": [{"id": "k1", "name": "other"}, {"id": "k2", "name": "bench"}]},
    )
    assert client.get_key() == SshKey(id="k2", name="bench")


def test_get_key_absent(mock, client):
    mock.get(BASE + "ssh-keys", json={"ssh_keys": [{"id": "k1", "name": "other"}]})
    assert client.get_key() is None


def test_create_instance_without_key(mock, client):
    mock.get(BASE + "ssh-keys", json={"ssh_keys": []})
    with pytest.raises(SshKeyNotFound):
        client.create_instance("ewr")


def test_create_instance(mock, client):
    mock.get(BASE + "ssh-keys", json={"ssh_keys": [{"id": "k2", "name": "bench"}]})
    mock.post(
        BASE + "instances",
        json={
            "instance": {
                "id": "new",
                "region": "ewr",
                "main_ip": "10.0.0.9",
                "tags": ["bench"],
                "specs": "vc2-1c",
                "status": "Active",
            }
        },
    )
    inst = client.create_instance("ewr")
    assert inst.id == "new"
    assert inst.is_active()
    sent = json.loads(mock.calls[1].request.body)
    assert sent["sshkey_id"] == ["k2"]
    assert sent["os_id"] == VultrClient.DEFAULT_OS
    assert sent["region"] == "ewr"
    assert sent["tag"] == "bench"


def test_delete_instance(mock, client):
    mock.delete(BASE + "instances/abc", status=204)
    result = client.delete_instance(Instance("abc", "ewr", "10.0.0.1"))
    assert result is None
    assert mock.calls[0].request.url == BASE + "instances/abc"


def test_delete_instance_failure_status(mock, client):
    mock.delete(BASE + "instances/abc", status=404)
    with pytest.raises(FailureResponseCode) as info:
        client.delete_instance(Instance("abc", "ewr", "10.0.0.1"))
    assert info.value.status.startswith("404")


def test_register_key_skips_existing(mock, client):
    mock.get(BASE + "ssh-keys", json={"ssh_keys": [{"id": "k", "name": "bench"}]})
    result = client.register_ssh_public_key("ssh-ed25519 AAAA placeholder")
    assert result is None
    assert len(mock.calls) == 1
    assert client.get_key() == SshKey(id="k", name="bench")


def test_register_key_uploads(mock, client):
    mock.get(BASE + "ssh-keys", json={"ssh_keys": []})
    mock.post(BASE + "ssh-keys", json={"ssh_key": {}})
    mock.get(BASE + "ssh-keys", json={"ssh_keys": [{"id": "k9", "name": "bench"}]})
    result = client.register_ssh_public_key("ssh-ed25519 AAAA placeholder")
    assert result is None
    assert json.loads(mock.calls[1].request.body) == {
        "name": "bench",
        "ssh_key": "ssh-ed25519 AAAA placeholder",
    }
    assert client.get_key() == SshKey(id="k9", name="bench")


def test_register_key_error_body(mock, client):
    mock.get(BASE + "ssh-keys", json={"ssh_keys": []})
    mock.post(BASE + "ssh-keys", json={"error": "invalid", "status": 400})
    with pytest.raises(FailureResponseCode) as info:
        client.register_ssh_public_key("ssh-ed25519 AAAA placeholder")
    assert info.value.status == "400"


def test_setup_commands_and_name(client):
    assert client.instance_setup_commands() == ["sudo ufw disable"]
    assert str(client) == "Vultr API client v2"
    assert VultrClient.USERNAME == "root"