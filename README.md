# mysticeti

Components for running and benchmarking a DAG-based consensus validator.

## Installation

```
pip install mysticeti
```

Use `pip install "mysticeti[test]"` to get the test dependencies as well.

## What is inside

- `mysticeti.types`: the consensus value types. `BlockReference` (author, round, digest; ordered by round and then authority), `AuthoritySet` (a bit set of up to 128 authorities), `Transaction`, `TransactionLocator` and `TransactionLocatorRange` (whose `verify()` raises `InvalidRangeError`). The statements are `Share`, `VoteStatement` and `VoteRange`, and the votes are `Accept` and `Reject`. `InternalEpochStatus`, `format_authority_index` and `format_authority_round` are here too.
- `mysticeti.stat`: `histogram()` returns a `PreciseHistogram` together with a thread-safe `HistogramSender`. The histogram keeps every point and reports `avg()`, `pct(pct1000)` and `pcts(...)` at per-mille ranks. Values sent through the sender are recorded by `receive_all()`.
- `mysticeti.transactions`: `TransactionGenerator(seed, transaction_size, load, max_block_size)` builds benchmark transactions. Each one holds an 8-byte timestamp, an 8-byte pseudo-random value and zero padding. `interval_batches()` returns one 100 ms interval's worth, split into batches by block size. `extract_timestamp` reads the timestamp back.
- `mysticeti.faults`: the fault models `Permanent` and `CrashRecovery`. `CrashRecoverySchedule.update()` returns a `CrashRecoveryAction` that lists the instances to kill and the instances to boot.
- `mysticeti.instance`: the cloud `Instance` model, `InstanceStatus`, and the abstract `ServerProviderClient` interface.
- `mysticeti.vultr`: `VultrClient`, a `ServerProviderClient` over a Vultr-style v2 HTTP API built on `requests`.
- `mysticeti.logs`: `LogsAnalyzer`, which counts ` ERROR` lines and panics in node and client logs and prints a summary.
- `mysticeti.display`: helpers that print styled progress to a stream, stdout by default. They are `header`, `error`, `warn`, `config`, `action`, `status`, `done` and `newline`.
- `mysticeti.errors`: the exception hierarchy. It is rooted at `TestbedError` and covers settings, cloud provider, SSH and monitor failures.

## Examples

```python
from mysticeti.stat import histogram

hist, sender = histogram()
for value in (10, 20, 30, 40):
    sender.observe(value)
hist.receive_all()
print(hist.avg(), hist.pct(500))  # 25 30
```

```python
from datetime import timedelta

from mysticeti.faults import CrashRecovery, CrashRecoverySchedule
from mysticeti.instance import Instance

instances = [Instance(id=str(i), region="", main_ip="127.0.0.1") for i in range(3)]
schedule = CrashRecoverySchedule(
    CrashRecovery(max_faults=3, interval=timedelta(seconds=60)), instances
)
print(schedule.update())  # 1 node(s) killed
```

```python
from mysticeti.vultr import VultrClient

client = VultrClient(
    token="token",
    base_url="https://api.example.com/v2/",
    regions=["ewr"],
    testbed_id="testbed",
    specs="vc2-1c-1gb",
)
for instance in client.list_instances():
    print(instance.id, instance.main_ip, instance.status)
```

## What it does not do

This package has no storage layer. It does not persist blocks or keep a write-ahead log. It has no consensus core, no networking, no validator node, and no command-line program to start one. The only cloud provider client is `VultrClient`. Beyond the logic to pick which instances to crash and recover, the orchestrator is not included: there is no SSH execution, no monitoring setup and no benchmark runner.