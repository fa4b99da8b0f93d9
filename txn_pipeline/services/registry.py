"""Implementations selectable by global CLI flag.

Each flag names one interface slot in the DI container and the concrete
classes that can fill it. Classes are referenced by dotted path and imported
only when chosen, so ``--mq memory`` never imports confluent-kafka and
``--metrics noop`` never imports prometheus_client.
"""

import importlib
from typing import Any, NamedTuple


class Slot(NamedTuple):
    interface: str
    impls: dict[str, str]


_SERVICES = "txn_pipeline.services"

SLOTS: dict[str, Slot] = {
    "mq": Slot(
        interface=f"{_SERVICES}.message_queue.interface.MessageQueueInterface",
        impls={
            "memory": f"{_SERVICES}.message_queue.memory_queue.MemoryQueue",
            "kafka": f"{_SERVICES}.message_queue.kafka_queue.KafkaQueue",
        },
    ),
    "metrics": Slot(
        interface=f"{_SERVICES}.metrics.interface.MetricsInterface",
        impls={
            "noop": f"{_SERVICES}.metrics.noop_metrics.NoopMetrics",
            "memory": f"{_SERVICES}.metrics.memory_metrics.MemoryMetrics",
            "prometheus": f"{_SERVICES}.metrics.prometheus_metrics.PrometheusMetrics",
        },
    ),
}


def resolve_class(dotted_path: str) -> type[Any]:
    module_path, _, class_name = dotted_path.rpartition(".")
    return getattr(importlib.import_module(module_path), class_name)


def _slot(flag_name: str) -> Slot:
    try:
        return SLOTS[flag_name]
    except KeyError:
        raise ValueError(f"Unknown interface flag: --{flag_name}") from None


def resolve_implementation(flag_name: str, impl_name: str) -> type[Any]:
    """Concrete class chosen by ``--<flag_name> <impl_name>``."""
    impls = _slot(flag_name).impls
    if impl_name not in impls:
        raise ValueError(
            f"Unknown implementation '{impl_name}' for --{flag_name} "
            f"(available: {', '.join(impls)})"
        )
    return resolve_class(impls[impl_name])


def resolve_interface_type(flag_name: str) -> type[Any]:
    """The ABC the chosen implementation is registered under."""
    return resolve_class(_slot(flag_name).interface)
