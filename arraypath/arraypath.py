# Copyright (c) 2025 Voxgig Ltd. MIT LICENSE.
#
# Array Path
# ==========
#
# Utility functions to read and write values deep inside in-memory
# containers (dicts and lists), addressed by a key or a dot path.
#
# Main utilities
# - get: get the value at a key or dot path, with a default.
# - set: set the value at a key or dot path, creating missing levels.
# - pull: remove a key and return its value.
# - getall, pullall: bulk versions of get and pull.
# - sort: sort a container in place using one of several strategies.
#
# Minor utilities
# - iscontainer, ismap, islist, iskey: identify value kinds.
# - strkey: string form of a key.
# - haskey: true if key value is defined.
# - keysof, values, items: list the entries of a container.
# - resolvepath: list of path segments a key addresses.
# - getint, getfloat, getstring, getbool: get with a loose cast.
# - first, last: first and last values in order.
# - include, exclude: filter a container by key.
# - test, testall: any and all over a predicate.


from typing import Any, Callable, List, Optional
from functools import cmp_to_key
import inspect
import json
import math
import re

# Canonical integer key, as a string.
R_INTKEY = re.compile(r'0|-?[1-9][0-9]*')

# Leading number of a string, for loose casts.
R_LEADINT = re.compile(r'^\s*[+-]?[0-9]+')
R_LEADFLOAT = re.compile(r'^\s*[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?')

# Digit runs, for natural ordering.
R_DIGITS = re.compile(r'([0-9]+)')

# General strings.
S_MT = ''
S_DT = '.'
S_U = 'u'

# Sort strategy names.
S_sort = 'sort'
S_asort = 'asort'
S_ksort = 'ksort'
S_usort = 'usort'
S_uasort = 'uasort'
S_uksort = 'uksort'

# Sort flags (same values as PHP).
SORT_REGULAR = 0
SORT_NUMERIC = 1
SORT_STRING = 2
SORT_NATURAL = 6
SORT_FLAG_CASE = 8


# The standard undefined value for this language.
UNDEF = None


class ArrayPathError(Exception):
    "Base class for array path errors."


class InvalidArgument(ArrayPathError, ValueError):
    "Arguments that cannot select or run a sort strategy."


class InvalidKeyKind(ArrayPathError, TypeError):
    "A value that cannot be used to address a container entry."


def iscontainer(val: Any = UNDEF) -> bool:
    "Value is a container - a map (dict) or list."
    return isinstance(val, (dict, list))


def ismap(val: Any = UNDEF) -> bool:
    "Value is a map (dict)."
    return isinstance(val, dict)


def islist(val: Any = UNDEF) -> bool:
    "Value is a list with integer keys (indexes)."
    return isinstance(val, list)


def iskey(key: Any = UNDEF) -> bool:
    "Value is a string or number that can address an entry."
    # Exclude bool (which is a subclass of int)
    if isinstance(key, bool):
        return False
    if isinstance(key, float):
        return math.isfinite(key)
    return isinstance(key, (str, int))


def strkey(key: Any = UNDEF) -> str:
    "String form of a key. Floats are floored."
    if not iskey(key):
        raise InvalidKeyKind(f"Not a valid key: {key!r} ({type(key).__name__}).")

    if isinstance(key, float):
        return str(math.floor(key))

    return str(key)


def _normkey(key):
    if not iskey(key):
        raise InvalidKeyKind(f"Not a valid key: {key!r} ({type(key).__name__}).")
    if isinstance(key, float):
        return math.floor(key)
    return key


def _intkey(key):
    if isinstance(key, int):
        return key
    if R_INTKEY.fullmatch(key):
        return int(key)
    return UNDEF


def _findkey(container, key):
    """
    Find the key under which container holds an entry for key, or UNDEF.
    Integer keys and their canonical strings address the same entry.
    """
    if ismap(container):
        if key in container:
            return key

        if isinstance(key, str):
            ikey = _intkey(key)
            if ikey is not UNDEF and ikey in container:
                return ikey
        elif str(key) in container:
            return str(key)

    elif islist(container):
        ikey = _intkey(key)
        if ikey is not UNDEF and 0 <= ikey < len(container):
            return ikey

    return UNDEF


def haskey(container: Any = UNDEF, key: Any = UNDEF) -> bool:
    "Value of the entry for key (taken literally) is defined."
    if not iscontainer(container) or not iskey(key):
        return False
    fkey = _findkey(container, _normkey(key))
    return fkey is not UNDEF and container[fkey] is not UNDEF


def keysof(container: Any = UNDEF) -> list:
    "Keys of a map in order, or indexes of a list."
    if ismap(container):
        return list(container.keys())
    elif islist(container):
        return list(range(len(container)))
    return []


def values(container: Any = UNDEF) -> list:
    "Values of a map or list in order."
    if ismap(container):
        return list(container.values())
    elif islist(container):
        return container[:]
    return []


def items(container: Any = UNDEF) -> list:
    "List the entries of a map or list as [key, value] tuples."
    if ismap(container):
        return list(container.items())
    elif islist(container):
        return list(enumerate(container))
    return []


def resolvepath(container: Any, key: Any) -> List[Any]:
    """
    Resolve a key to the list of path segments it addresses in container.

    A key that exists as-is in the container is a single segment, even if
    it contains dots. Otherwise the string form of the key is split on
    dots. A list or tuple is already a path, and is used as given.
    """
    if isinstance(key, (list, tuple)):
        if 0 == len(key):
            raise InvalidKeyKind("Empty path.")
        return [_normkey(part) for part in key]

    key = _normkey(key)

    # Direct keys win over paths.
    if iscontainer(container) and _findkey(container, key) is not UNDEF:
        return [key]

    parts = strkey(key).split(S_DT)
    if len(parts) <= 1:
        return [key]

    return parts


def get(container: Any, key: Any, alt: Any = UNDEF) -> Any:
    """
    Get the value at a key or dot path. Missing keys, missing levels and
    undefined values all return the alternative value.
    """
    val = container
    for part in resolvepath(container, key):
        fkey = _findkey(val, part)
        if fkey is UNDEF:
            return alt
        val = val[fkey]

    if UNDEF == val:
        return alt

    return val


def _listindex(key):
    # Index a list can hold for key: a non-negative integer, or UNDEF.
    ikey = _intkey(key)
    if ikey is UNDEF or ikey < 0:
        return UNDEF
    return ikey


def _putentry(parent, key, val):
    # Assign into a map or list, returning the key actually used.
    if ismap(parent):
        fkey = _findkey(parent, key)
        fkey = key if fkey is UNDEF else fkey
        parent[fkey] = val
        return fkey

    ikey = _listindex(key)

    # Pad past the end, so the value lands at the index asked for.
    if len(parent) < ikey:
        parent.extend([UNDEF] * (ikey - len(parent)))

    if ikey == len(parent):
        parent.append(val)
    else:
        parent[ikey] = val

    return ikey


def set(container: Any, key: Any, val: Any) -> Any:
    """
    Set the value at a key or dot path, and return the container.
    Missing levels are created as maps, and so are levels holding a
    scalar, which is discarded.

    A list level given a key it cannot hold (not a non-negative integer)
    becomes a map of its indexes. A top level list cannot be replaced,
    so it is returned unchanged.
    """
    if not iscontainer(container):
        return container

    parts = resolvepath(container, key)
    lastI = len(parts) - 1

    parent = UNDEF
    pkey = UNDEF
    node = container
    for pI, part in enumerate(parts):
        if islist(node) and _listindex(part) is UNDEF:
            if parent is UNDEF:
                return container
            node = dict(enumerate(node))
            parent[pkey] = node

        if pI == lastI:
            _putentry(node, part, val)
        else:
            fkey = _findkey(node, part)
            if fkey is UNDEF or not iscontainer(node[fkey]):
                fkey = _putentry(node, part, {})
            parent = node
            pkey = fkey
            node = node[fkey]

    return container


def pull(container: Any, key: Any, alt: Any = UNDEF) -> Any:
    """
    Remove the entry for key and return its value.
    NOTE: the key is always taken literally; dot paths are not followed.
    """
    key = _normkey(key)

    if not iscontainer(container):
        return alt

    fkey = _findkey(container, key)
    if fkey is UNDEF:
        return alt

    # List elements after the removed one shift down.
    val = container.pop(fkey)

    if UNDEF == val:
        return alt

    return val


def _entrydefault(entry, alt):
    # A bulk entry is a key, or a (key, default) pair.
    if isinstance(entry, (list, tuple)):
        if 0 == len(entry):
            raise InvalidKeyKind("Empty bulk entry.")
        if 1 == len(entry):
            return entry[0], alt
        return entry[0], entry[1]
    return entry, alt


def getall(container: Any, keys: List[Any], alt: Any = UNDEF) -> List[Any]:
    """
    Get the values for a list of keys, in order. An entry may be a
    (key, default) pair to use its own default value.
    """
    out = []
    for entry in keys:
        key, entryalt = _entrydefault(entry, alt)
        out.append(get(container, key, entryalt))

    return out


def pullall(container: Any, keys: List[Any], alt: Any = UNDEF) -> List[Any]:
    """
    Pull the values for a list of keys, in order. An entry may be a
    (key, default) pair to use its own default value.

    List indexes refer to the positions before any entry is removed.
    """
    if not islist(container):
        out = []
        for entry in keys:
            key, entryalt = _entrydefault(entry, alt)
            out.append(pull(container, key, entryalt))
        return out

    out = []
    taken = []
    for entry in keys:
        key, entryalt = _entrydefault(entry, alt)
        fkey = _findkey(container, _normkey(key))
        if fkey is UNDEF or fkey in taken:
            out.append(entryalt)
            continue

        taken.append(fkey)
        val = container[fkey]
        out.append(entryalt if UNDEF == val else val)

    for fkey in sorted(taken, reverse=True):
        del container[fkey]

    return out


def _tostr(val):
    if UNDEF == val:
        return S_MT
    if isinstance(val, bool):
        return '1' if val else S_MT
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    if isinstance(val, str):
        return val
    if iscontainer(val):
        try:
            return json.dumps(val, separators=(',', ':'))
        except (TypeError, ValueError):
            return str(val)
    return str(val)


def _tofloat(val):
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        m = R_LEADFLOAT.match(val)
        return float(m.group(0)) if m else 0.0
    if iscontainer(val):
        return 1.0 if 0 < len(val) else 0.0
    return 0.0


def _toint(val):
    if isinstance(val, float):
        return int(val) if math.isfinite(val) else 0
    if isinstance(val, int):
        return int(val)
    if isinstance(val, str):
        m = R_LEADINT.match(val)
        return int(m.group(0)) if m else 0
    if iscontainer(val):
        return 1 if 0 < len(val) else 0
    return 0


def _tobool(val):
    if isinstance(val, str):
        return val != S_MT and val != '0'
    return bool(val)


def getint(container: Any, key: Any, alt: Any = UNDEF) -> int:
    "Get a value as an int."
    return _toint(get(container, key, alt))


def getfloat(container: Any, key: Any, alt: Any = UNDEF) -> float:
    "Get a value as a float."
    return _tofloat(get(container, key, alt))


def getstring(container: Any, key: Any, alt: Any = UNDEF) -> str:
    "Get a value as a string."
    return _tostr(get(container, key, alt))


def getbool(container: Any, key: Any, alt: Any = UNDEF) -> bool:
    "Get a value as a bool. The strings '' and '0' are false."
    return _tobool(get(container, key, alt))


def first(container: Any, alt: Any = UNDEF) -> Any:
    "First value in order, or the alternative value if empty."
    vals = values(container)
    if 0 == len(vals) or UNDEF == vals[0]:
        return alt
    return vals[0]


def last(container: Any, alt: Any = UNDEF) -> Any:
    "Last value in order, or the alternative value if empty."
    vals = values(container)
    if 0 == len(vals) or UNDEF == vals[-1]:
        return alt
    return vals[-1]


def _keyfilter(container, keys, keep):
    wanted = [strkey(key) for key in keys]
    entries = [(key, val) for key, val in items(container)
               if (iskey(key) and strkey(key) in wanted) == keep]

    if islist(container):
        return [val for _, val in entries]

    return dict(entries)


def include(container: Any, keys: List[Any]) -> Any:
    "New container with only the entries for the given keys."
    return _keyfilter(container, keys, True)


def exclude(container: Any, keys: List[Any]) -> Any:
    "New container without the entries for the given keys."
    return _keyfilter(container, keys, False)


def _arity(func):
    # Number of positional arguments func accepts, capped at 2.
    try:
        params = inspect.signature(func).parameters.values()
    except (ValueError, TypeError):
        # Builtins without a signature, such as bool, take one value.
        return 1

    count = 0
    for param in params:
        if param.kind == param.VAR_POSITIONAL:
            return 2
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            count += 1

    return min(count, 2)


def _caller(func):
    if _arity(func) < 2:
        return lambda val, key: func(val)
    return func


def test(container: Any, func: Callable) -> bool:
    """
    True if func is true for any entry (like JavaScript Array.some).
    func is called as func(val, key), or func(val) if it takes one argument.
    """
    call = _caller(func)
    for key, val in items(container):
        if call(val, key):
            return True
    return False


def testall(container: Any, func: Callable) -> bool:
    """
    True if func is true for every entry (like JavaScript Array.every).
    func is called as func(val, key), or func(val) if it takes one argument.
    """
    call = _caller(func)
    for key, val in items(container):
        if not call(val, key):
            return False
    return True


# -----------------------------------------------------------------------------
# Sorting.


def _cmp(a, b):
    return (a > b) - (a < b)


def _kindrank(val):
    if UNDEF == val:
        return 0
    if isinstance(val, bool):
        return 1
    if isinstance(val, (int, float)):
        return 2
    if isinstance(val, str):
        return 3
    if islist(val):
        return 4
    return 5


def _regularcmp(a, b):
    # Values of different kinds order by kind, then by string form.
    try:
        return _cmp(a, b)
    except TypeError:
        return _cmp(_kindrank(a), _kindrank(b)) or _cmp(_tostr(a), _tostr(b))


def _naturalkey(s):
    # Split parts alternate text, digits, text, ...
    return [int(part) if pI % 2 else part
            for pI, part in enumerate(R_DIGITS.split(s))]


def _flagkey(flags):
    # Key function for a set of sort flags.
    fold = bool(flags & SORT_FLAG_CASE)
    base = flags & ~SORT_FLAG_CASE

    if SORT_NUMERIC == base:
        return _tofloat

    if SORT_STRING == base:
        if fold:
            return lambda val: _tostr(val).casefold()
        return _tostr

    if SORT_NATURAL == base:
        if fold:
            return lambda val: _naturalkey(_tostr(val).casefold())
        return lambda val: _naturalkey(_tostr(val))

    return cmp_to_key(_regularcmp)


class SortSpec:
    """
    How to sort a container. Build with one of:
    - SortSpec.natural(flags): values by natural order, re-indexed.
    - SortSpec.by_comparator(func): values by func(a, b), re-indexed.
    - SortSpec.named(name, flags): a named strategy (sort, asort, ksort).
    - SortSpec.named_with_comparator(name, func): a named strategy
      ordered by func(a, b) (usort, uasort, uksort).
    """

    NATURAL = 'natural'
    COMPARATOR = 'comparator'
    NAMED = 'named'
    NAMED_COMPARATOR = 'named_comparator'

    # Strategy name -> (re-index, order by key).
    STRATEGIES = {
        S_sort: (True, False),
        S_asort: (False, False),
        S_ksort: (False, True),
        S_usort: (True, False),
        S_uasort: (False, False),
        S_uksort: (False, True),
    }

    def __init__(
        self,
        kind: str,
        name: str = S_sort,
        func: Optional[Callable] = None,
        flags: int = SORT_REGULAR
    ) -> None:
        self.kind = kind
        self.name = name
        self.func = func
        self.flags = flags

    @classmethod
    def natural(cls, flags: int = SORT_REGULAR) -> 'SortSpec':
        return cls(cls.NATURAL, S_sort, None, flags)

    @classmethod
    def by_comparator(cls, func: Callable) -> 'SortSpec':
        _checkfunc(func)
        return cls(cls.COMPARATOR, S_usort, func)

    @classmethod
    def named(cls, name: str, flags: int = SORT_REGULAR) -> 'SortSpec':
        _checkname(name)
        if name.startswith(S_U):
            raise InvalidArgument(
                f"Sort strategy {name} needs a comparator "
                f"(usort, uasort and uksort all do).")
        return cls(cls.NAMED, name, None, flags)

    @classmethod
    def named_with_comparator(cls, name: str, func: Callable) -> 'SortSpec':
        _checkname(name)
        _checkfunc(func)
        if not name.startswith(S_U):
            name = S_U + name
        return cls(cls.NAMED_COMPARATOR, name, func)

    def reindex(self) -> bool:
        return self.STRATEGIES[self.name][0]

    def bykey(self) -> bool:
        return self.STRATEGIES[self.name][1]

    def keyfunc(self) -> Callable:
        "Key function for sorted()."
        if self.func is None:
            return _flagkey(self.flags)
        return cmp_to_key(self.func)

    def __eq__(self, other):
        return (
            isinstance(other, SortSpec) and
            (self.kind, self.name, self.func, self.flags) ==
            (other.kind, other.name, other.func, other.flags)
        )

    def __repr__(self):
        return (
            f"SortSpec({self.kind!r}, name={self.name!r}, "
            f"func={self.func!r}, flags={self.flags!r})"
        )


def _checkname(name):
    if name not in SortSpec.STRATEGIES:
        raise InvalidArgument(
            f"Unknown sort strategy: {name!r} (expected one of: " +
            ', '.join(SortSpec.STRATEGIES.keys()) + ").")


def _checkfunc(func):
    if not callable(func):
        raise InvalidArgument(f"Sort comparator must be callable, not: {func!r}.")


def sortspec(func: Any = None, ufunc: Optional[Callable] = None,
             flags: int = SORT_REGULAR) -> SortSpec:
    """
    Build a SortSpec from the arguments of sort:
    - nothing: natural order, using flags.
    - a comparator function.
    - a strategy name, using flags.
    - a strategy name and a comparator (ufunc), ignoring flags.

    Raises InvalidArgument for a u-strategy (usort, uasort, uksort) named
    without a comparator, for a strategy name outside the six known ones,
    and for a comparator (or other argument) that is not callable.
    """
    if isinstance(func, SortSpec):
        return func

    if func is None:
        return SortSpec.natural(flags)

    if isinstance(func, str):
        if ufunc is None:
            return SortSpec.named(func, flags)
        return SortSpec.named_with_comparator(func, ufunc)

    if callable(func):
        return SortSpec.by_comparator(func)

    raise InvalidArgument(f"Cannot sort using: {func!r}.")


def sort(container: Any, func: Any = None, ufunc: Optional[Callable] = None,
         flags: int = SORT_REGULAR) -> Any:
    """
    Sort a container in place, and return it. See sortspec for the
    accepted arguments. Re-indexing strategies replace map keys with
    0..n-1. Lists always keep their values in sorted positions.
    Raises InvalidArgument as sortspec does: a u-strategy without a
    comparator, an unknown strategy name, or a non-callable comparator.
    """
    spec = sortspec(func, ufunc, flags)

    if not iscontainer(container):
        return container

    keyfunc = spec.keyfunc()
    pos = 0 if spec.bykey() else 1
    entries = sorted(items(container), key=lambda entry: keyfunc(entry[pos]))

    if islist(container):
        container[:] = [val for _, val in entries]
    else:
        container.clear()
        if spec.reindex():
            container.update(enumerate(val for _, val in entries))
        else:
            container.update(entries)

    return container


# Create an ArrayUtility class with all utility functions as attributes
class ArrayUtility:
    def __init__(self):
        self.exclude = exclude
        self.first = first
        self.get = get
        self.getall = getall
        self.getbool = getbool
        self.getfloat = getfloat
        self.getint = getint
        self.getstring = getstring
        self.haskey = haskey
        self.include = include
        self.iscontainer = iscontainer
        self.iskey = iskey
        self.islist = islist
        self.ismap = ismap
        self.items = items
        self.keysof = keysof
        self.last = last
        self.pull = pull
        self.pullall = pullall
        self.resolvepath = resolvepath
        self.set = set
        self.sort = sort
        self.sortspec = sortspec
        self.strkey = strkey
        self.test = test
        self.testall = testall
        self.values = values


__all__ = [
    'ArrayPathError',
    'ArrayUtility',
    'InvalidArgument',
    'InvalidKeyKind',
    'SORT_FLAG_CASE',
    'SORT_NATURAL',
    'SORT_NUMERIC',
    'SORT_REGULAR',
    'SORT_STRING',
    'SortSpec',
    'exclude',
    'first',
    'get',
    'getall',
    'getbool',
    'getfloat',
    'getint',
    'getstring',
    'haskey',
    'include',
    'iscontainer',
    'iskey',
    'islist',
    'ismap',
    'items',
    'keysof',
    'last',
    'pull',
    'pullall',
    'resolvepath',
    'set',
    'sort',
    'sortspec',
    'strkey',
    'test',
    'testall',
    'values',
]
