"""
Writing generated files to disk.

Applies each file's write mode and permissions, hands ``merge`` files
to the target's merge hook and reports what was written.
"""

import asyncio
import hashlib
import time
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from .core.models import FileMode, GeneratedAsset, GeneratedFile, SourceFile
from .core.target import Target
from .logging_config import get_logger

logger = get_logger(__name__)


def checksum(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _write(path: Path, content: str, permissions: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    path.chmod(int(permissions, 8))


def write_files(
    target: Target,
    target_dir: Union[str, Path],
    files: List[GeneratedFile],
    last_files: Optional[Mapping[str, GeneratedFile]] = None,
) -> List[GeneratedAsset]:
    """
    Write generated files below ``target_dir``.

    Args:
        target: Target that generated the files, used for merging
        target_dir: Output root directory
        files: Files returned by ``Target.generate``
        last_files: Previously generated versions by filename, for merging

    Returns:
        Assets for the files that were written
    """
    root = Path(target_dir)
    last_files = last_files or {}
    assets: List[GeneratedAsset] = []

    for file in files:
        path = root / file.filename
        output = file

        if file.mode == FileMode.SKIP:
            continue

        if path.exists():
            if file.mode == FileMode.CREATE_ONLY:
                logger.debug("Not overwriting existing file %s", file.filename)
                continue

            if file.mode == FileMode.MERGE:
                source = SourceFile(
                    filename=file.filename,
                    content=path.read_text(encoding="utf-8"),
                    permissions=format(path.stat().st_mode & 0o777, "o"),
                )
                output = target.merge_file(source, file, last_files.get(file.filename))

        _write(path, output.content, output.permissions)
        logger.debug("Wrote %s (%s, %s)", output.filename, output.mode, output.permissions)

        assets.append(
            GeneratedAsset(
                filename=output.filename,
                mode=output.mode,
                permissions=output.permissions,
                modified=int(time.time() * 1000),
                checksum=checksum(output.content),
            )
        )

    return assets


async def generate_to_directory(
    target: Target,
    data: Any,
    context: Any,
    target_dir: Union[str, Path],
    last_files: Optional[Mapping[str, GeneratedFile]] = None,
) -> List[GeneratedAsset]:
    """
    Run a full generation into ``target_dir``.

    Preprocessing, rendering, writing and postprocessing run strictly one
    after the other.
    """
    data = await target.preprocess(data)
    files = target.generate(data, context)
    assets = await asyncio.to_thread(write_files, target, target_dir, files, last_files)
    await target.postprocess(target_dir, assets)
    logger.info("Wrote %d file(s) to %s", len(assets), target_dir)
    return assets
