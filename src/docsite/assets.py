"""Static asset copying."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_assets(
    source_dir: Path,
    output_dir: Path,
    dirs: list[str],
    files: list[str],
) -> list[Path]:
    """Copy static assets from the content tree into the build output.

    Missing assets are skipped. Copies keep their bytes and modification times.

    Args:
        source_dir: Content root
        output_dir: Build output root
        dirs: Directory names relative to source_dir (e.g., "images")
        files: File names relative to source_dir (e.g., "favicon.svg")

    Returns:
        Output paths of the copied directories and files
    """
    copied: list[Path] = []

    for name in dirs:
        source = source_dir / name
        if not source.is_dir():
            logger.debug(f"Asset directory not present, skipped: {name}")
            continue
        target = output_dir / name
        shutil.copytree(source, target, dirs_exist_ok=True)
        logger.info(f"Copied asset directory: {name}")
        copied.append(target)

    for name in files:
        source = source_dir / name
        if not source.is_file():
            logger.debug(f"Asset file not present, skipped: {name}")
            continue
        target = output_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, target)
        logger.info(f"Copied asset file: {name}")
        copied.append(target)

    return copied
