import logging
from pathlib import Path

from cleanpatch.config import ApplyConfig
from cleanpatch.journal import ApplyJournal
from cleanpatch.patch.applicator import apply_patch
from cleanpatch.patch.errors import DestinationMissingError, PatchApplyError
from cleanpatch.patch.models import ChangeKind, Patch, PatchSet
from cleanpatch.patch.paths import ensure_within, resolve_destination

logger = logging.getLogger(__name__)


def resolve_patch_paths(
    patch: Patch,
    base_dir: Path,
    strip_count: int,
    config: ApplyConfig,
) -> tuple[Path, Path | None]:
    """Resolve the destination of a patch and, for renames, its source."""
    destination = resolve_destination(base_dir, patch.destination_path, strip_count)
    source = None
    if patch.change_kind == ChangeKind.RENAMED:
        source = resolve_destination(base_dir, patch.old_path, strip_count)

    if config.confine_to_base:
        ensure_within(base_dir, destination)
        if source is not None:
            ensure_within(base_dir, source)

    return destination, source


def apply_patch_set(
    patch_set: PatchSet,
    base_dir: Path,
    strip_count: int,
    config: ApplyConfig | None = None,
    journal: ApplyJournal | None = None,
) -> list[Path]:
    """
    Apply the patches of `patch_set` in order under `base_dir`.

    Stops at the first patch that fails. Files changed by earlier patches
    stay changed.

    Returns:
        Every path written or removed, in application order.

    Raises:
        PatchApplyError: the first failure encountered.
    """
    config = config or ApplyConfig()
    base_dir = Path(base_dir)
    if journal is None and config.journal_path is not None:
        journal = ApplyJournal(config.journal_path)

    logger.debug("Applying %d patches to %s with -p%d", len(patch_set.patches), base_dir, strip_count)
    if journal:
        journal.log_apply_started(base_dir, strip_count, len(patch_set.patches))

    touched: list[Path] = []
    for index, patch in enumerate(patch_set.patches):
        try:
            destination, source = resolve_patch_paths(patch, base_dir, strip_count, config)
            required = source if source is not None else destination
            if patch.change_kind != ChangeKind.CREATED and not required.exists():
                raise DestinationMissingError(required)

            paths = apply_patch(patch, destination, source_path=source, config=config)
        except PatchApplyError as exc:
            logger.warning("Patch %d (%s) failed: %s", index + 1, patch.destination_path, exc)
            if journal:
                journal.log_patch_failed(index, patch.change_kind, exc.error_type, str(exc))
            raise

        touched.extend(paths)
        logger.info("Applied %s patch to %s", patch.change_kind, destination)
        if journal:
            journal.log_patch_applied(index, patch.change_kind, paths)

    if journal:
        journal.log_apply_finished(len(patch_set.patches))
    return touched
