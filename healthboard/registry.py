from __future__ import annotations

from pathlib import Path

import yaml

from healthboard.models import Endpoint, EndpointRegistry


def load_endpoints(path: str | Path) -> list[Endpoint]:
    """
    Read the endpoint list from YAML. The list is loaded once at startup and
    stays fixed for the lifetime of the process.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing endpoints file at {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    reg = EndpointRegistry.model_validate(data)
    return list(reg.endpoints)
