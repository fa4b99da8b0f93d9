"""``--env-file <name>`` support: reads ``.env/<name>.env`` from the project root.

Lines look like ``KEY=value`` or ``export KEY=value``. Blank lines and ``#``
comments are skipped, one pair of matching quotes around a value is removed,
and anything after the first ``=`` is the value verbatim.
"""

import re
from pathlib import Path

# txn_pipeline/config/ -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_ASSIGNMENT = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=(.*)$")


def load_env_file(env_name: str, project_root: Path | None = None) -> dict[str, str]:
    path = (project_root or _PROJECT_ROOT) / ".env" / f"{env_name}.env"
    if not path.is_file():
        raise FileNotFoundError(f"env file not found: {path}")
    return parse_env_lines(path.read_text().splitlines())


def parse_env_lines(lines: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in lines:
        match = _ASSIGNMENT.match(line.strip())
        if match is None:
            continue
        key, value = match.group(1), match.group(2).strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key] = value
    return values
