"""Collection-level operations: media deletion and note type changes."""

import logging
from collections.abc import Iterable, Sequence

from .errors import NotetypeNotFoundError, TemplateOrdinalError, UnknownChangeError
from .model import ChangeType, Notetype, OrdinalMode, Template, TemplateChange
from .ports import MediaStore, NotetypeStore

log = logging.getLogger(__name__)


def delete_media(col: MediaStore, unused: Iterable[str]) -> int:
    """
    Remove the given media names from the collection in one call.

    Returns the number of names requested, not the number of files that
    existed; the store skips names that are already gone.
    """
    names = list(unused)
    if not names:
        return 0
    log.debug("delete_media: removing %d file(s)", len(names))
    col.remove_media_files(names)
    return len(names)


def _template_at(templates: list[Template], ordinal: int, which: str) -> Template:
    # Negative ordinals are out of range, not Python-style indexes
    if not 0 <= ordinal < len(templates):
        raise TemplateOrdinalError(ordinal, len(templates), which)
    return templates[ordinal]


def save_notetype(
    col: NotetypeStore,
    notetype: Notetype,
    template_changes: Sequence[TemplateChange],
    *,
    ordinals: OrdinalMode = OrdinalMode.LIVE,
) -> None:
    """
    Handle a whole note type edit at once: template adds/deletes followed by
    the content update.

    Template changes are applied to the stored (old) definition in order.
    ADD ordinals index ``notetype.tmpls``; DELETE ordinals index the old
    definition's templates, read according to ``ordinals``.

    There is no rollback: if a change fails, the ones before it have already
    been handed to the store.

    Raises:
        NotetypeNotFoundError: no stored note type with ``notetype.id``
        TemplateOrdinalError: an ordinal is outside the relevant list
        UnknownChangeError: a change kind is not a ChangeType
    """
    log.debug("save_notetype %s", notetype.id)
    old = col.get_notetype_by_id(notetype.id)
    if old is None:
        raise NotetypeNotFoundError(notetype.id)

    new_templates = notetype.tmpls
    snapshot = list(old.tmpls)
    for change in template_changes:
        old_templates = old.tmpls if ordinals is OrdinalMode.LIVE else snapshot
        if change.kind is ChangeType.ADD:
            log.debug("save_notetype: adding template %s", change.ordinal)
            template = _template_at(new_templates, change.ordinal, "new")
            col.add_template(old, template)
        elif change.kind is ChangeType.DELETE:
            log.debug(
                "save_notetype: deleting template currently at ordinal %s", change.ordinal
            )
            template = _template_at(old_templates, change.ordinal, "old")
            col.remove_template(old, template)
        else:
            raise UnknownChangeError(change.kind)

    # The stored modification time can't go backwards, and adding templates
    # above already touched the old definition.
    notetype["mod"] = old.mod
    col.save_notetype(notetype)
    col.update_notetype(notetype)
