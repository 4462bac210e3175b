from typing import List, Sequence, TypeVar

T = TypeVar("T")


def is_valid_move(length: int, from_index: int, to_index: int) -> bool:
    return 0 <= from_index < length and 0 <= to_index < length


def reorder(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """Move ``items[from_index]`` so it ends up at ``to_index``.

    Splice semantics: the element is removed first and then inserted at
    ``to_index`` of the shortened list. Invalid indices return an unchanged
    copy.
    """
    result = list(items)
    if not is_valid_move(len(result), from_index, to_index):
        return result

    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return result
