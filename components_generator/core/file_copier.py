"""Filesystem primitives used by the generator.

Recursive copies are split into a planning step, which only reads the source
tree, and an execution step, which performs the writes:

    >>> plan = plan_build_copy(library_dir, target_dir, exclude=["README.md"])
    >>> [str(op.destination) for op in plan.files]
    ['build/basic/functions.php', 'build/basic/inc/template-tags.php', ...]
    >>> execute_copy_plan(config, plan, wipe_target=True)

Exclusions only apply to the entries directly under the source root. Nested
entries that share a name with an excluded root entry are still copied.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from components_generator.helpers.generator_config import GeneratorConfig
from components_generator.helpers.helpers_logging import log_message


@dataclass(frozen=True)
class CopyOperation:
    """A single file copy from ``source`` to ``destination``."""

    source: Path
    destination: Path


@dataclass
class CopyPlan:
    """Directories to create and files to copy for a recursive copy.

    Attributes:
        target_root: Root directory of the copy.
        directories: Directories below the root, parents first.
        files: File copies, in walk order.
    """

    target_root: Path
    directories: list[Path] = field(default_factory=list)
    files: list[CopyOperation] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.directories and not self.files


def ensure_directory(
    config: GeneratorConfig,
    directory: Path,
    delete_if_exists: bool = False,
) -> None:
    """Create ``directory`` (with parents) unless it exists.

    With ``delete_if_exists`` an existing directory is wiped and recreated.
    Creation failures are logged, not raised.
    """
    if not directory.exists():
        try:
            directory.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError:
            log_message(config, f"Error: {directory} directory was not able to be created.")
    elif delete_if_exists and directory.is_dir():
        delete_directory(config, directory)
        ensure_directory(config, directory)


def delete_file(config: GeneratorConfig, path: Path) -> bool:
    """Remove a single file, logging on failure."""
    try:
        path.unlink()
    except OSError:
        log_message(config, f"Error: {path} file was not able to be deleted.")
        return False
    return True


def delete_directory(config: GeneratorConfig, directory: Path) -> bool:
    """Remove a directory tree, children first.

    Every entry that cannot be removed is logged and skipped.

    Returns:
        True if the directory itself was removed
    """
    entries = sorted(directory.rglob("*"), key=lambda p: len(p.parts), reverse=True)
    for entry in entries:
        is_dir = entry.is_dir() and not entry.is_symlink()
        try:
            if is_dir:
                entry.rmdir()
            else:
                entry.unlink()
        except OSError:
            func = "rmdir" if is_dir else "unlink"
            log_message(
                config,
                f"Error: {func} function was not able to be executed. Arguments were: {entry}.",
            )
    try:
        directory.rmdir()
    except OSError:
        log_message(config, f"Error: {directory} directory was not able to be deleted.")
        return False
    return True


def copy_files(
    config: GeneratorConfig,
    src_dir: Path,
    files: Iterable[str],
    target_dir: Path,
) -> None:
    """Copy the named files from ``src_dir`` into ``target_dir``.

    Each name is a path relative to ``src_dir`` and keeps that relative name in
    the target. Nothing is touched when ``files`` is empty.

    Raises:
        FileNotFoundError: If a named file does not exist in ``src_dir``
    """
    names = list(files)
    if not names:
        return

    ensure_directory(config, target_dir)

    for name in names:
        shutil.copyfile(src_dir / name, target_dir / name)


def plan_build_copy(
    source_dir: Path,
    target_dir: Path,
    exclude: Iterable[str] = (),
) -> CopyPlan:
    """Plan a recursive copy of ``source_dir`` into ``target_dir``.

    Reads the source tree only. Entries are visited in sorted order.
    ``exclude`` names are skipped at the root level only.
    """
    plan = CopyPlan(target_root=target_dir)
    if not source_dir.is_dir():
        return plan

    _plan_directory(plan, source_dir, target_dir, set(exclude))
    return plan


def _plan_directory(
    plan: CopyPlan,
    source_dir: Path,
    target_dir: Path,
    exclude: set[str],
) -> None:
    for entry in sorted(source_dir.iterdir(), key=lambda p: p.name):
        if entry.name in exclude:
            continue
        destination = target_dir / entry.name
        if entry.is_dir():
            plan.directories.append(destination)
            # Nested directories are planned without the exclusion list.
            _plan_directory(plan, entry, destination, set())
        else:
            plan.files.append(CopyOperation(entry, destination))


def execute_copy_plan(
    config: GeneratorConfig,
    plan: CopyPlan,
    wipe_target: bool = False,
) -> None:
    """Carry out a :class:`CopyPlan`.

    Args:
        config: Active generator configuration (for logging)
        plan: Plan produced by :func:`plan_build_copy`
        wipe_target: Delete and recreate an existing target root first
    """
    ensure_directory(config, plan.target_root, delete_if_exists=wipe_target)
    for directory in plan.directories:
        ensure_directory(config, directory)
    for op in plan.files:
        shutil.copyfile(op.source, op.destination)


def copy_build_files(
    config: GeneratorConfig,
    source_dir: Path,
    target_dir: Path,
    exclude: Iterable[str] = (),
    dry_run: bool = False,
) -> CopyPlan:
    """Copy a library tree into a fresh build directory.

    The target root is wiped before copying. Non-directory sources are a
    no-op. With ``dry_run`` the plan is returned without touching the disk.
    """
    plan = plan_build_copy(source_dir, target_dir, exclude)
    if dry_run or not source_dir.is_dir():
        return plan
    execute_copy_plan(config, plan, wipe_target=True)
    return plan
