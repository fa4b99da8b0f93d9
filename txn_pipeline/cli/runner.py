"""``python -m txn_pipeline run <module> [global flags] [module args]``.

Module arguments are declared in each module's ``module.json``; global flags
pick the message queue, metrics and logging implementations registered in the
DI container before the module class is resolved from it.
"""

from __future__ import annotations

import asyncio
import importlib
import json
import sys
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from txn_pipeline.config.container import Container
from txn_pipeline.config.context import ModuleConfig
from txn_pipeline.config.env_loader import load_env_file
from txn_pipeline.modules.base import Module
from txn_pipeline.services.lifecycle.lifecycle_manager import LifecycleManager
from txn_pipeline.services.logger.factory import LoggerFactory
from txn_pipeline.services.registry import resolve_implementation, resolve_interface_type
from txn_pipeline.services.secrets.env_secrets import EnvSecrets
from txn_pipeline.services.secrets.interface import SecretsInterface

MODULES_DIR = Path(__file__).resolve().parent.parent / "modules"

USAGE = "Usage: python -m txn_pipeline run <module_name> [flags] [module args]"

# Implementation flags and their defaults. ``<FLAG>_IMPL`` in the
# environment overrides the default, an explicit flag overrides both.
IMPL_FLAGS: dict[str, str] = {
    "mq": "kafka",
    "metrics": "noop",
    "log": "pretty",
}

_GLOBAL_HELP = [
    ("mq", "Message queue: memory, kafka [default: kafka]"),
    ("metrics", "Metrics: noop, memory, prometheus [default: noop]"),
    ("log", "Logging format: pretty, memory [default: pretty]"),
    ("env", "JSON object of env var overrides"),
    ("env-file", "Load .env/<name>.env before --env overrides"),
]


def _to_decimal(raw: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ValueError(raw) from None


_CASTS: dict[str, Any] = {
    "string": str,
    "integer": int,
    "float": float,
    "decimal": _to_decimal,
    "boolean": lambda raw: raw.lower() in ("true", "1", "yes"),
}


@dataclass(frozen=True)
class ArgSpec:
    name: str
    description: str = ""
    type: str = "string"
    default: Any = None
    required: bool = False
    choices: tuple[Any, ...] = ()

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ArgSpec:
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            type=data.get("type", "string"),
            default=data.get("default"),
            required=data.get("required", False),
            choices=tuple(data.get("choices", ())),
        )

    def cast(self, raw: str) -> Any:
        if self.type not in _CASTS:
            raise ValueError(f"--{self.name} declares unsupported type '{self.type}'")
        return _CASTS[self.type](raw)

    def help_line(self) -> str:
        extra = " (required)" if self.required else ""
        if self.default is not None:
            extra += f" [default: {self.default}]"
        if self.choices:
            extra += f" (choices: {', '.join(str(c) for c in self.choices)})"
        return f"    --{self.name:22s} {self.description}{extra}"


@dataclass(frozen=True)
class ModuleDescriptor:
    """A module's ``module.json``: identity, job/worker type and arguments."""

    name: str
    display_name: str
    description: str
    type: str = "job"
    version: str = ""
    args: tuple[ArgSpec, ...] = field(default_factory=tuple)

    @classmethod
    def load(cls, module_name: str) -> ModuleDescriptor:
        path = MODULES_DIR / module_name / "module.json"
        if not path.exists():
            raise FileNotFoundError(f"module '{module_name}' not found at {path}")
        data = json.loads(path.read_text())
        return cls(
            name=data["name"],
            display_name=data.get("display_name", data["name"]),
            description=data.get("description", ""),
            type=data.get("type", "job"),
            version=data.get("version", ""),
            args=tuple(ArgSpec.from_json(a) for a in data.get("args", [])),
        )

    @property
    def is_worker(self) -> bool:
        return self.type == "worker"

    def parse_args(self, raw_args: list[str]) -> dict[str, Any]:
        """Cast ``--name value`` pairs per the declared args and fill defaults.

        All problems are collected and raised together as one ValueError.
        """
        given = _pair_flags(raw_args)
        known = {arg.name for arg in self.args}
        errors = [f"Unknown argument: --{name}" for name in given if name not in known]
        result: dict[str, Any] = {}

        for arg in self.args:
            if arg.name in given:
                raw = given[arg.name]
            elif arg.default is not None:
                raw = str(arg.default)
            else:
                if arg.required:
                    errors.append(f"Missing required argument: --{arg.name}")
                continue
            try:
                value = arg.cast(raw)
            except ValueError:
                errors.append(f"Invalid {arg.type} for --{arg.name}: '{raw}'")
                continue
            if arg.choices and value not in arg.choices:
                errors.append(
                    f"Invalid value for --{arg.name}: '{value}' "
                    f"(choices: {', '.join(str(c) for c in arg.choices)})"
                )
                continue
            result[arg.name] = value

        if errors:
            raise ValueError("; ".join(errors))
        return result

    def help_text(self) -> str:
        title = f"{self.display_name} v{self.version}" if self.version else self.display_name
        lines = [f"\n  {title}", f"  {self.description}\n", f"  Type: {self.type}\n"]
        if self.args:
            lines.append("  Module arguments:")
            lines.extend(arg.help_line() for arg in self.args)
            lines.append("")
        lines.append("  Global flags:")
        lines.extend(f"    --{name:22s} {text}" for name, text in _GLOBAL_HELP)
        return "\n".join(lines) + "\n"


def _pair_flags(raw_args: list[str]) -> dict[str, str]:
    """``["--a", "1", "--flag"]`` -> ``{"a": "1", "flag": "true"}``. Stray values are ignored."""
    pairs: dict[str, str] = {}
    i = 0
    while i < len(raw_args):
        token = raw_args[i]
        if not token.startswith("--"):
            i += 1
            continue
        has_value = i + 1 < len(raw_args) and not raw_args[i + 1].startswith("--")
        pairs[token[2:]] = raw_args[i + 1] if has_value else "true"
        i += 2 if has_value else 1
    return pairs


def _parse_env_json(raw: str) -> dict[str, str]:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("--env value must be a JSON object")
    if not all(isinstance(k, str) and isinstance(v, str) for k, v in data.items()):
        raise ValueError("--env JSON must have string keys and string values")
    return data


@dataclass
class GlobalOptions:
    impls: dict[str, str] = field(default_factory=dict)
    env: dict[str, str] = field(default_factory=dict)

    @classmethod
    def split(cls, argv: list[str]) -> tuple[GlobalOptions, list[str]]:
        """Separate global flags from module args.

        ``impls`` only holds implementations chosen explicitly on the command
        line. ``--env`` values win over an ``--env-file``.
        """
        options = cls()
        env_file: str | None = None
        module_args: list[str] = []
        global_names = set(IMPL_FLAGS) | {"env", "env-file"}

        i = 0
        while i < len(argv):
            name = argv[i][2:] if argv[i].startswith("--") else None
            if name in global_names and i + 1 < len(argv):
                value = argv[i + 1]
                if name == "env":
                    options.env.update(_parse_env_json(value))
                elif name == "env-file":
                    env_file = value
                else:
                    options.impls[name] = value
                i += 2
            else:
                module_args.append(argv[i])
                i += 1

        if env_file:
            options.env = {**load_env_file(env_file), **options.env}
        return options, module_args


def build_container(options: GlobalOptions, module_args: dict[str, Any]) -> Container:
    container = Container()
    secrets = EnvSecrets(overrides=options.env)
    container.register_instance(SecretsInterface, secrets)
    container.register_instance(ModuleConfig, ModuleConfig(module_args))
    container.register_instance(LifecycleManager, LifecycleManager())

    def chosen(flag: str) -> str:
        return options.impls.get(flag) or secrets.get_or_default(
            f"{flag.upper()}_IMPL", IMPL_FLAGS[flag]
        )

    container.register_instance(LoggerFactory, LoggerFactory(default_impl=chosen("log")))
    for flag in ("mq", "metrics"):
        impl = container.resolve(resolve_implementation(flag, chosen(flag)))
        container.register_instance(resolve_interface_type(flag), impl)
    return container


async def _run_worker(module: Module, lifecycle: LifecycleManager) -> int:
    loop = asyncio.get_running_loop()
    lifecycle.install_signal_handlers(loop)
    try:
        return await module.run()
    finally:
        lifecycle.remove_signal_handlers(loop)
        await lifecycle.shutdown()


def run_module(argv: list[str]) -> tuple[int, Module | None]:
    """Run ``run <module> ...`` and return (exit_code, module instance).

    ``--help`` prints the module's arguments and returns ``(0, None)``.
    """
    if len(argv) < 2 or argv[0] != "run":
        raise ValueError(USAGE)

    descriptor = ModuleDescriptor.load(argv[1])
    rest = argv[2:]
    if "--help" in rest or "-h" in rest:
        print(descriptor.help_text())
        return 0, None

    options, raw_module_args = GlobalOptions.split(rest)
    container = build_container(options, descriptor.parse_args(raw_module_args))

    main = importlib.import_module(f"txn_pipeline.modules.{argv[1]}.main")
    module_cls = getattr(main, "module_class", None)
    if module_cls is None:
        raise AttributeError(f"{main.__name__} must define a 'module_class' attribute")
    module = container.resolve(module_cls)

    if descriptor.is_worker:
        exit_code = asyncio.run(_run_worker(module, container.get(LifecycleManager)))
    else:
        exit_code = asyncio.run(module.run())
    return exit_code, module


def run_cli(argv: list[str] | None = None) -> None:
    try:
        exit_code, _ = run_module(sys.argv[1:] if argv is None else argv)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)
