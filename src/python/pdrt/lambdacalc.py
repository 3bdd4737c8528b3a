"""Lambda calculus over PDRS's: alpha conversion, beta reduction, function composition
and purification.

An unresolved PDRS is a function from PDRS atoms (PDRS's or referents) to a PDRS, or to
another unresolved PDRS when more arguments are pending.
"""

import logging
from functools import reduce

from pdrt.exception import PDRSError
from pdrt.log import ExceptionRateLimitedLogAdaptor
from pdrt.pdrs import AbstractPDRS, PDRSRef


_actual_logger = logging.getLogger(__name__)
_logger = ExceptionRateLimitedLogAdaptor(_actual_logger)


## Types that can be substituted into an unresolved PDRS.
PDRSAtom = (AbstractPDRS, PDRSRef)


def _check_atom(x):
    if not isinstance(x, PDRSAtom):
        raise TypeError('expected a PDRS or PDRSRef, got %s' % type(x).__name__)


def pdrs_alpha_convert(p, ps, rs):
    """Applies alpha conversion to a PDRS on the basis of a conversion list for projection
    variables ps and a conversion list for referents rs.

    Args:
        p: A PDRS|LambdaPDRS|AMerge|PMerge instance.
        ps: A list of (old,new) PVar tuples.
        rs: A list of (old,new) PDRSRef tuples.

    Returns:
        The converted PDRS.

    Raises:
        ConversionError: if a conversion list is malformed.
    """
    if not isinstance(p, AbstractPDRS):
        raise TypeError
    try:
        result = p.alpha_convert(ps, rs)
    except PDRSError:
        _logger.exception('alpha conversion failed', rlimitby='alpha_convert')
        raise
    _actual_logger.debug('alpha converted %s to %s', p, result)
    return result


def pdrs_purify(p):
    """Converts a PDRS into a pure PDRS, where a PDRS is pure iff there are no
    occurrences of duplicate, unbound uses of the same projection variable or
    projected referent.
    """
    if not isinstance(p, AbstractPDRS):
        raise TypeError
    result = p.purify()
    _actual_logger.debug('purified %s to %s', p, result)
    return result


def pdrs_beta_reduce(f, x):
    """Applies beta reduction to an unresolved PDRS f with the atom x.

    Args:
        f: An unresolved PDRS, or any callable accepting a PDRS atom.
        x: A PDRS|PDRSRef instance.

    Returns:
        A PDRS, or an unresolved PDRS if f expects more arguments.
    """
    _check_atom(x)
    return f(x)


def pdrs_function_compose(f, g):
    """Composes two unresolved PDRS's, so that (f*g)(x) == f(g(x)).

    Returns:
        An UnresolvedPDRS instance.
    """
    if not callable(f) or not callable(g):
        raise TypeError
    return UnresolvedPDRS(lambda x: f(g(x)))


def apply_all(f, args):
    """Beta reduces f with each atom in args in turn."""
    return reduce(pdrs_beta_reduce, args, f)


class UnresolvedPDRS(object):
    """A PDRS with pending arguments.

    The builder is called with all arguments once the arity is satisfied. Use << for beta
    reduction and * for function composition.
    """
    def __init__(self, builder, arity=1, args=None):
        """Constructor.

        Args:
            builder: A callable taking arity PDRS atoms.
            arity: The number of arguments builder takes.
            args: Arguments already supplied.
        """
        if not callable(builder) or not isinstance(arity, int) or arity < 1:
            raise TypeError
        args = [] if args is None else list(args)
        if len(args) >= arity:
            raise TypeError
        self._builder = builder
        self._arity = arity
        self._args = args

    def __repr__(self):
        return 'UnresolvedPDRS(%i/%i)' % (len(self._args), self._arity)

    def __call__(self, *atoms):
        f = self
        for x in atoms:
            f = pdrs_beta_reduce(f._apply if isinstance(f, UnresolvedPDRS) else f, x)
        return f

    def __lshift__(self, atom):
        return pdrs_beta_reduce(self, atom)

    def __mul__(self, other):
        return pdrs_function_compose(self, other)

    def _apply(self, x):
        args = self._args + [x]
        if len(args) == self._arity:
            return self._builder(*args)
        return UnresolvedPDRS(self._builder, self._arity, args)

    @property
    def arity(self):
        """The number of arguments still pending."""
        return self._arity - len(self._args)

    @property
    def args(self):
        return [x for x in self._args]
