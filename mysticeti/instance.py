"""Cloud instances and the interface that cloud provider clients implement."""

from __future__ import annotations

import abc
import enum
import ipaddress
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Union


class InstanceStatus(enum.Enum):
    """Lifecycle state of a cloud instance."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"
    TERMINATED = "Terminated"

    @classmethod
    def parse(cls, text: str) -> "InstanceStatus":
        """Map a provider's status string; anything unknown is inactive."""
        lowered = text.lower()
        if lowered == "running":
            return cls.ACTIVE
        if lowered == "terminated":
            return cls.TERMINATED
        return cls.INACTIVE


@dataclass(frozen=True)
class Instance:
    """A cloud provider instance."""

    id: str
    region: str
    main_ip: Union[ipaddress.IPv4Address, str]
    tags: tuple[str, ...] = field(default_factory=tuple)
    specs: str = ""
    status: InstanceStatus = InstanceStatus.ACTIVE

    SSH_PORT: ClassVar[int] = 22

    def __post_init__(self) -> None:
        object.__setattr__(self, "main_ip", ipaddress.IPv4Address(self.main_ip))
        object.__setattr__(self, "tags", tuple(self.tags))

    def is_active(self) -> bool:
        """Whether the instance is active and running."""
        return self.status is InstanceStatus.ACTIVE

    def is_inactive(self) -> bool:
        """Whether the instance is not ready for use."""
        return not self.is_active()

    def is_terminated(self) -> bool:
        """Whether the instance is being deleted."""
        return self.status is InstanceStatus.TERMINATED

    def ssh_address(self) -> tuple[str, int]:
        """Host and port to reach the instance over SSH."""
        return (str(self.main_ip), self.SSH_PORT)


class ServerProviderClient(abc.ABC):
    """A client that manages instances at a cloud provider."""

    USERNAME: ClassVar[str]

    @abc.abstractmethod
    def list_instances(self) -> list[Instance]:
        """List all existing instances, regardless of their status."""

    @abc.abstractmethod
    def start_instances(self, instances: Iterable[Instance]) -> None:
        """Start the given instances."""

    @abc.abstractmethod
    def stop_instances(self, instances: Iterable[Instance]) -> None:
        """Halt the given instances; they may still be billed."""

    @abc.abstractmethod
    def create_instance(self, region: str) -> Instance:
        """Create an instance in the given region."""

    @abc.abstractmethod
    def delete_instance(self, instance: Instance) -> None:
        """Delete an instance so that it is no longer billed."""

    @abc.abstractmethod
    def register_ssh_public_key(self, public_key: str) -> None:
        """Authorise an SSH public key to access the instances."""

    @abc.abstractmethod
    def instance_setup_commands(self) -> list[str]:
        """Provider-specific commands to set up an instance."""