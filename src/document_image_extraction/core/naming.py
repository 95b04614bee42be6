"""File name helpers shared by the batch runner and the writers."""

import os


def unique_name(name, taken):
    """
    Return ``name``, or ``<stem>-<n><ext>`` with the smallest ``n >= 2`` not in ``taken``.

    Parameters
    ----------
    name : str
        Preferred file name.
    taken : collection of str
        Names already in use.
    """
    if name not in taken:
        return name

    stem, ext = os.path.splitext(name)
    n = 2
    while f"{stem}-{n}{ext}" in taken:
        n += 1
    return f"{stem}-{n}{ext}"


def unique_names(names):
    """Disambiguate repeated names, keeping the first occurrence unchanged."""
    taken = set(names)
    seen = set()
    result = []
    for name in names:
        if name in seen:
            name = unique_name(name, taken)
            taken.add(name)
        seen.add(name)
        result.append(name)
    return result
