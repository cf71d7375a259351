"""Load serialization requests from JSON descriptions.

Expected shape::

    {
      "entryPoint": "/app/index.js",
      "preModules": [{"path": "__prelude__", "output": [{"type": "js/script/virtual", "code": "..."}]}],
      "graph": {
        "entryPoints": ["/app/index.js"],
        "transformOptions": {"platform": "web"},
        "dependencies": [
          {"path": "/app/index.js", "dependencies": ["/app/App.js"], "source": "...",
           "output": [{"type": "js/module", "code": "...", "data": {}}]}
        ]
      },
      "options": {"sourceUrl": "...", "sourceMapUrl": "...", "dev": false,
                  "projectRoot": "/app", "serverRoot": "/app", "runModule": true}
    }

``dependencies`` may also be a mapping of path to module record.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .models import Graph, Module, ModuleOutput, SerializationRequest, SerializerOptions
from .ordering import ModuleIdRegistry

_OPTION_FIELDS = {
    "sourceUrl": "source_url",
    "sourceMapUrl": "source_map_url",
    "dev": "dev",
    "projectRoot": "project_root",
    "serverRoot": "server_root",
    "runModule": "run_module",
}


class GraphFormatError(ValueError):
    """Raised when a request description does not match the expected shape."""


def load_request(
    source: Path | Mapping[str, Any],
    *,
    create_module_id: Callable[[str], int] | None = None,
    defaults: Mapping[str, Any] | None = None,
) -> SerializationRequest:
    """Build a :class:`SerializationRequest` from a JSON file or parsed mapping.

    ``defaults`` supplies option values (snake_case) used when the
    description omits them; ``create_module_id`` defaults to a fresh
    :class:`ModuleIdRegistry`.
    """
    data = _read(source) if isinstance(source, Path) else source
    if not isinstance(data, Mapping):
        raise GraphFormatError("Request description must be a JSON object")

    entry_point = data.get("entryPoint")
    if not isinstance(entry_point, str) or not entry_point:
        raise GraphFormatError("'entryPoint' must be a non-empty string")

    pre_modules = tuple(_module(item, "preModules") for item in _as_list(data.get("preModules"), "preModules"))
    graph = _graph(data.get("graph"))
    options = _options(
        data.get("options"),
        create_module_id=create_module_id if create_module_id is not None else ModuleIdRegistry(),
        defaults=defaults or {},
    )
    return SerializationRequest(
        entry_point=entry_point,
        pre_modules=pre_modules,
        graph=graph,
        options=options,
    )


def _read(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise GraphFormatError(f"{path.name} is not valid JSON: {exc}") from exc


def _graph(value: Any) -> Graph:
    if value is None:
        return Graph()
    if not isinstance(value, Mapping):
        raise GraphFormatError("'graph' must be an object")

    raw_dependencies = value.get("dependencies", [])
    dependencies: Dict[str, Module] = {}
    if isinstance(raw_dependencies, Mapping):
        for path, record in raw_dependencies.items():
            if isinstance(record, Mapping) and "path" not in record:
                record = {**record, "path": path}
            module = _module(record, "graph.dependencies")
            dependencies[module.path] = module
    else:
        for record in _as_list(raw_dependencies, "graph.dependencies"):
            module = _module(record, "graph.dependencies")
            dependencies[module.path] = module

    transform_options = value.get("transformOptions", {})
    if not isinstance(transform_options, Mapping):
        raise GraphFormatError("'graph.transformOptions' must be an object")

    entry_points = tuple(str(item) for item in _as_list(value.get("entryPoints"), "graph.entryPoints"))
    return Graph(
        dependencies=dependencies,
        entry_points=entry_points,
        transform_options=dict(transform_options),
    )


def _module(record: Any, where: str) -> Module:
    if not isinstance(record, Mapping):
        raise GraphFormatError(f"Entries of '{where}' must be objects")
    path = record.get("path")
    if not isinstance(path, str) or not path:
        raise GraphFormatError(f"Module in '{where}' is missing a 'path'")
    outputs: List[ModuleOutput] = []
    for item in _as_list(record.get("output"), f"{where}[{path}].output"):
        if not isinstance(item, Mapping) or not isinstance(item.get("type"), str):
            raise GraphFormatError(f"Output of module '{path}' must be an object with a 'type'")
        data = item.get("data") or {}
        if not isinstance(data, Mapping):
            raise GraphFormatError(f"Output data of module '{path}' must be an object")
        outputs.append(ModuleOutput(type=item["type"], code=str(item.get("code", "")), data=dict(data)))
    dependencies: Tuple[str, ...] = tuple(
        str(dep) for dep in _as_list(record.get("dependencies"), f"{where}[{path}].dependencies")
    )
    return Module(
        path=path,
        output=tuple(outputs),
        dependencies=dependencies,
        source=str(record.get("source", "")),
    )


def _options(
    value: Any,
    *,
    create_module_id: Callable[[str], int],
    defaults: Mapping[str, Any],
) -> SerializerOptions:
    if value is None:
        value = {}
    if not isinstance(value, Mapping):
        raise GraphFormatError("'options' must be an object")
    fields: Dict[str, Any] = {key: val for key, val in defaults.items() if val is not None}
    extras: Dict[str, Any] = {}
    for key, val in value.items():
        target = _OPTION_FIELDS.get(key)
        if target is None:
            extras[key] = val
        elif val is not None:
            fields[target] = val
    for key, flag in (("dev", "dev"), ("runModule", "run_module")):
        if flag in fields and not isinstance(fields[flag], bool):
            raise GraphFormatError(f"'options.{key}' must be a boolean")
    return SerializerOptions(create_module_id=create_module_id, extras=extras, **fields)


def _as_list(value: Optional[Any], where: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    raise GraphFormatError(f"'{where}' must be a list")


__all__ = ["GraphFormatError", "load_request"]
