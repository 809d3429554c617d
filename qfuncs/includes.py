"""Compile include groups into a single script."""

import logging
from pathlib import Path

from qfuncs.errors import IncludeError

logger = logging.getLogger(__name__)

DEFAULT_INCLUDES_DIR = Path("includes")


def compile_includes(groups: list[str], includes_dir: Path = DEFAULT_INCLUDES_DIR) -> str:
    """Concatenate the .js files of each include group.

    Args:
        groups: Include group names, each a directory below includes_dir
        includes_dir: Directory holding the include groups

    Returns:
        The concatenated scripts, groups in the given order and files
        sorted by name within a group

    Raises:
        IncludeError: If a group directory or file cannot be read
    """
    parts = []
    for group in groups:
        group_dir = includes_dir / group
        try:
            files = sorted(p for p in group_dir.iterdir() if p.suffix == ".js")
        except OSError as e:
            raise IncludeError(f"failed reading include files: {e}") from e
        for path in files:
            try:
                parts.append(path.read_text(encoding="utf-8"))
            except OSError as e:
                raise IncludeError(
                    f"failed reading include file '{path.name}': {e}"
                ) from e
        logger.debug(f"Included {len(files)} files from group '{group}'")
    return "".join(parts)
