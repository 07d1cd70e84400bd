from typing import Protocol, Iterable

from .model import NotetypeId, Notetype, Template


class NotetypeStore(Protocol):
    """
    Owns note type definitions. add_template/remove_template act on the
    definition handed in; nothing is durable until save + update.
    """

    def get_notetype_by_id(self, id: NotetypeId) -> Notetype | None:
        pass

    def add_template(self, notetype: Notetype, template: Template) -> None:
        pass

    def remove_template(self, notetype: Notetype, template: Template) -> None:
        pass

    def save_notetype(self, notetype: Notetype) -> None:
        pass

    def update_notetype(self, notetype: Notetype) -> None:
        pass


class MediaStore(Protocol):
    """
    Flat media folder. Removing a name that is not present is not an error.
    """

    def remove_media_files(self, names: list[str]) -> None:
        pass

    def list_media(self) -> Iterable[str]:
        pass


class Collection(NotetypeStore, MediaStore, Protocol):
    pass
