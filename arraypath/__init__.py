# arraypath init

from .arraypath import (
    ArrayPathError,
    ArrayUtility,
    InvalidArgument,
    InvalidKeyKind,
    SORT_FLAG_CASE,
    SORT_NATURAL,
    SORT_NUMERIC,
    SORT_REGULAR,
    SORT_STRING,
    SortSpec,
    exclude,
    first,
    get,
    getall,
    getbool,
    getfloat,
    getint,
    getstring,
    haskey,
    include,
    iscontainer,
    iskey,
    islist,
    ismap,
    items,
    keysof,
    last,
    pull,
    pullall,
    resolvepath,
    set,
    sort,
    sortspec,
    strkey,
    test,
    testall,
    values,
)


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
