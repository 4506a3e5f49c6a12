"""Greedy size-bounded packing of files into upload groups."""
from typing import List, Sequence

from .errors import ConfigError
from .models import FileDescriptor, Group


def pack(files: Sequence[FileDescriptor], budget: int) -> List[Group]:
    """
    Partition files into groups whose total size stays within ``budget``.

    Greedy descending first-fit in a single pass after the sort:
    a file larger than the budget is emitted at once as its own group,
    without closing the group being filled; otherwise a file that would
    overflow the current group closes it and starts the next one.

    Args:
        files: Files to pack, in caller order
        budget: Maximum bytes per group

    Returns:
        Groups in the order they were closed
    """
    if isinstance(budget, bool) or not isinstance(budget, int) or budget <= 0:
        raise ConfigError(f"byte budget must be a positive integer, got {budget!r}")

    # sorted() is stable: ties keep caller order
    ordered = sorted(files, key=lambda f: f.size, reverse=True)

    groups: List[Group] = []
    current: List[FileDescriptor] = []
    current_size = 0

    for file in ordered:
        if file.size > budget:
            groups.append((file,))
        elif current_size + file.size > budget:
            if current:
                groups.append(tuple(current))
            current = [file]
            current_size = file.size
        else:
            current.append(file)
            current_size += file.size

    if current:
        groups.append(tuple(current))

    return groups
