"""Read the fields a client requested on the current GraphQL node."""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Set, Tuple

from strawberry.types import Info
from strawberry.types.nodes import FragmentSpread, InlineFragment, SelectedField


@dataclass(frozen=True)
class Selection:
    """Immediate child fields of one GraphQL node."""
    fields: Tuple[str, ...] = ()
    relations: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, *names: str, relations: Iterable[str] = ()) -> "Selection":
        return cls(fields=tuple(names), relations=frozenset(relations))


def _collect(selections: Iterable, names: List[str], relations: Set[str]) -> None:
    for selection in selections:
        if isinstance(selection, SelectedField):
            if selection.name not in names:
                names.append(selection.name)
            if selection.selections:
                relations.add(selection.name)
        elif isinstance(selection, (InlineFragment, FragmentSpread)):
            # fragments sit at the same level as the fields around them
            _collect(selection.selections, names, relations)


def selection_from_info(info: Info) -> Selection:
    """
    Build the Selection for the field being resolved.

    Only the immediate children are inspected; nested fields are handled by
    the shaping of each relation.
    """
    names: List[str] = []
    relations: Set[str] = set()
    for selected in info.selected_fields:
        _collect(selected.selections, names, relations)
    return Selection(fields=tuple(names), relations=frozenset(relations))
