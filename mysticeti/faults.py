"""Fault schedules: which instances to crash and recover during a benchmark."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, Union

from .instance import Instance


def _whole_seconds(interval: timedelta) -> int:
    return interval // timedelta(seconds=1)


@dataclass(frozen=True, repr=False)
class Permanent:
    """Permanently crash a number of nodes from the beginning."""

    faults: int = 0

    def crash_interval(self) -> timedelta:
        """One second, to crash the nodes as fast as possible."""
        return timedelta(seconds=1)

    def __repr__(self) -> str:
        return f"{self.faults}"

    def __str__(self) -> str:
        if self.faults == 0:
            return "no faults"
        return f"{self.faults} crashed"


@dataclass(frozen=True, repr=False)
class CrashRecovery:
    """Progressively crash and recover nodes."""

    max_faults: int
    interval: timedelta

    def crash_interval(self) -> timedelta:
        return self.interval

    def __repr__(self) -> str:
        return f"{self.max_faults}-{_whole_seconds(self.interval)}cr"

    def __str__(self) -> str:
        return f"{self.max_faults} crash-recovery, {_whole_seconds(self.interval)}s"


FaultsType = Union[Permanent, CrashRecovery]


@dataclass
class CrashRecoveryAction:
    """Instances to boot and instances to kill."""

    boot: list[Instance] = field(default_factory=list)
    kill: list[Instance] = field(default_factory=list)

    @classmethod
    def booting(cls, instances: Iterable[Instance]) -> "CrashRecoveryAction":
        return cls(boot=list(instances))

    @classmethod
    def killing(cls, instances: Iterable[Instance]) -> "CrashRecoveryAction":
        return cls(kill=list(instances))

    @classmethod
    def no_op(cls) -> "CrashRecoveryAction":
        return cls()

    def __str__(self) -> str:
        booted = len(self.boot)
        killed = len(self.kill)
        if not self.boot:
            return f"{killed} node(s) killed"
        if not self.kill:
            return f"{booted} node(s) recovered"
        return f"{killed} node(s) killed and {booted} node(s) recovered"


class CrashRecoverySchedule:
    """Decides, at each step, which instances to crash or recover."""

    def __init__(self, faults_type: FaultsType, instances: Iterable[Instance]) -> None:
        self.faults_type = faults_type
        self.instances = list(instances)
        self.dead = 0

    def _take(self, low: int, high: int) -> list[Instance]:
        if high > len(self.instances):
            raise ValueError(
                f"not enough instances: need {high}, have {len(self.instances)}"
            )
        return self.instances[low:high]

    def update(self) -> CrashRecoveryAction:
        """Return the next action to apply to the testbed."""
        faults_type = self.faults_type
        if isinstance(faults_type, Permanent):
            if self.dead == 0:
                to_kill = self._take(0, faults_type.faults)
                self.dead = faults_type.faults
                return CrashRecoveryAction.killing(to_kill)
            return CrashRecoveryAction.no_op()

        max_faults = faults_type.max_faults
        min_faults = max_faults // 3

        if self.dead == max_faults:
            to_recover = self._take(0, max_faults)
            self.dead = 0
            return CrashRecoveryAction.booting(to_recover)

        if self.dead == 0 and min_faults != 0:
            low, high = 0, min_faults
        elif self.dead == min_faults and min_faults != 0:
            low, high = min_faults, 2 * min_faults
        else:
            low, high = 2 * min_faults, max_faults
        to_kill = self._take(low, high)
        self.dead += high - low
        return CrashRecoveryAction.killing(to_kill)