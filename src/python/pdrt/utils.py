from collections.abc import Iterable


def iterable_type_check(theList, type_info, emptyOK=True):
    if not isinstance(theList, Iterable):
        return False
    if not emptyOK and len(theList) == 0:
        return False
    for i in theList:
        if not isinstance(i, type_info):
            return False
    return True


def union(a, *args):
    '''Union two lists.'''
    y = []
    y.extend(a)
    for b in args:
        y.extend([x for x in b if x not in y])
    return y


def union_inplace(a, *args):
    for b in args:
        for x in b:
            if x not in a: a.append(x)
    return a


def intersect(a, b):
    '''Find common elements, in the order they appear in a.'''
    return [x for x in a if x in b]


def rename_var(v, rs):
    """Renames a variable v, iff v occurs in a variable conversion list. Otherwise, v is returned unmodified"""
    for r,s in rs:
        if v == r: return s
    return v


def remove_dups(orig):
    """Remove duplicates from a list but maintain ordering"""
    uniq = set(orig)
    r = []
    for o in orig:
        if o in uniq:
            r.append(o)
            uniq.discard(o)
    return r

