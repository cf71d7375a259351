"""Reference CSS extractor producing static CSS artifacts."""

from __future__ import annotations

import os
import posixpath
from typing import Callable, List, Mapping, Optional

from ..models import Module, SerialAsset
from ..naming import file_name_from_contents, path_to_html_safe_name

CSS_OUTPUT_DIR = "_expo/static/css"


def get_css_code(module: Module) -> Optional[str]:
    """Return CSS attached to a module's js output (``data["css"]["code"]``) or a css output."""
    for output in module.output:
        if output.type == "css" or output.type.startswith("css/"):
            return output.code
    js_output = module.js_output()
    if js_output is None:
        return None
    css = js_output.data.get("css")
    if isinstance(css, Mapping):
        code = css.get("code")
        if isinstance(code, str):
            return code
    return None


class StaticCssExtractor:
    """Emits one ``_expo/static/css/<name>-<hash>.css`` asset per CSS module."""

    async def extract(
        self,
        dependencies: Mapping[str, Module],
        *,
        project_root: str,
        process_module_filter: Callable[[Module], bool],
    ) -> List[SerialAsset]:
        assets: List[SerialAsset] = []
        for module in dependencies.values():
            if module.js_output() is None or module.is_asset():
                continue
            if not process_module_filter(module):
                continue
            relative = _relative(project_root, module.path)
            if relative == "package.json":
                continue
            contents = get_css_code(module)
            if contents is None:
                continue
            name = file_name_from_contents(module.path, contents)
            assets.append(
                SerialAsset(
                    filename=posixpath.join(CSS_OUTPUT_DIR, f"{name}.css"),
                    origin_filename=relative,
                    type="css",
                    source=contents,
                    metadata={"hmrId": path_to_html_safe_name(relative)},
                )
            )
        return assets


def _relative(root: str, path: str) -> str:
    if not root:
        return path
    return os.path.relpath(path, root).replace(os.sep, "/")


__all__ = ["CSS_OUTPUT_DIR", "StaticCssExtractor", "get_css_code"]
