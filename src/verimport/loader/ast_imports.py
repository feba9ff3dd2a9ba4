"""Extract the modules a Python source file imports, using stdlib ast."""

from __future__ import annotations

import ast
from collections.abc import Callable


def resolve_relative(package_path: str, module: str | None, level: int) -> str:
    """Turn a relative import into an absolute dotted path.

    ``package_path`` is the package that contains the importing file. Raises
    ValueError when the import climbs above the top-level package.
    """
    if level == 0:
        return module or ""
    parts = package_path.split(".")
    if level - 1 >= len(parts):
        raise ValueError(
            f"relative import {'.' * level}{module or ''} escapes package {package_path}"
        )
    anchor = parts[: len(parts) - (level - 1)]
    if module:
        anchor.append(module)
    return ".".join(anchor)


def extract_imports(
    source: str,
    package_path: str,
    *,
    filename: str = "<unknown>",
    is_module: Callable[[str], bool] | None = None,
) -> set[str]:
    """Return the distinct dotted import paths referenced by one source file.

    ``from X import a`` records ``X``, and also ``X.a`` when ``is_module``
    says ``X.a`` is a module or package. Absolute and relative forms are
    treated alike. Raises SyntaxError for unparsable source.
    """
    imports: set[str] = set()
    if not source.strip():
        return imports

    tree = ast.parse(source, filename=filename)
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name)

        elif isinstance(node, ast.ImportFrom):
            if node.level == 0 and node.module == "__future__":
                continue
            target = resolve_relative(package_path, node.module, node.level)
            imports.add(target)
            if is_module is None:
                continue
            for alias in node.names:
                if alias.name != "*" and is_module(f"{target}.{alias.name}"):
                    imports.add(f"{target}.{alias.name}")

    return imports
