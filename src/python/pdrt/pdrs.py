"""Projective Discourse Representation Structures.

A PDRS is one of LambdaPDRS, AMerge, PMerge or PDRS. The classes here hold
the structure, answer binding and accessibility queries over it, and
implement the traversals behind alpha conversion and purification.
Instances are never modified after construction.
"""

import logging
import networkx as nx

from pdrt.common import SHOW_SET, SHOW_DEBUG, Showable, DRSVar
from pdrt.exception import ConversionError
from pdrt.utils import iterable_type_check, union, union_inplace, intersect, rename_var, remove_dups


_logger = logging.getLogger(__name__)


PVar = int


## @remarks Returns opvs unchanged when there are no existing projection variables.
def get_new_pvars(opvs, epvs):
    """Returns a list of new projection variables from a list of old
    PVar's opvs, based on a list of existing PVar's epvs.

    Args:
        opvs: Old projection variables.
        epvs: Existing projection variables.

    Returns:
        A list of projection variables.
    """
    if len(epvs) == 0: return list(opvs)
    n = max(epvs) + 1
    return [x+n for x in range(len(opvs))]


## @remarks New referents are unique across the returned list as well as against ers.
def get_new_drsrefs(ors, ers):
    """Returns a list of new PDRSRef's, based on a list of old PDRSRef's ors and a list of
    existing PDRSRef's ers. Each new referent is derived from its old referent by increasing
    its index until it is neither existing nor one of the remaining old referents.
    """
    ors = list(ors)
    ers = list(ers)
    result = []
    for i in range(len(ors)):
        rd = ors[i].increase_new()
        while rd in ors[i+1:] or rd in ers:
            rd = rd.increase_new()
        ers.insert(0, rd)
        result.append(rd)
    return result


def get_new_prefs(prs, ers):
    """Returns a list of new PRef's, based on a list of old PRef's prs and a list of existing
    PDRSRef's ers. Projection variables are kept, referents are replaced by new ones.
    """
    nrs = get_new_drsrefs([x.ref for x in prs], ers)
    return [PRef(pr.plabel, r) for pr, r in zip(prs, nrs)]


def _check_conversions(cl, type_info):
    """Returns the conversion list cl as a list of (old,new) tuples or raises ConversionError."""
    if cl is None:
        return []
    try:
        cl = list(cl)
    except TypeError:
        raise ConversionError('conversion list must be iterable')
    for x in cl:
        if not isinstance(x, tuple) or len(x) != 2 or not iterable_type_check(x, type_info):
            raise ConversionError('invalid conversion %s, expected a tuple of %s' % (repr(x), type_info.__name__))
    return cl


## @remarks Free projection variables are never renamed.
def rename_pvar(pv, lp, gp, ps):
    """Converts a PVar into a new PVar in case it occurs bound in
    local PDRS lp in global PDRS gp.

    Args:
        pv: The projection variable to rename.
        lp: The local PDRS.
        gp: The global PDRS.
        ps: A list project variable tuples for renaming.

    Returns:
        A projection variable.
    """
    if len(ps) == 0 or not gp.test_bound_pvar(pv, lp):
        return pv
    return rename_var(pv, ps)


## @remarks Boundness is tested with the pointer as already converted by the caller.
def rename_pdrsref(pv, r, lp, gp, rs):
    """Applies alpha conversion to the referent r of projected referent PRef(pv,r), in
    local PDRS lp which is in global PDRS gp, on the basis of a conversion list rs.
    """
    if len(rs) == 0 or not PRef(pv, r).has_bound(lp, gp):
        return r
    return rename_var(r, rs)


def rename_mapper(m, lp, gp, ps):
    """Applies alpha conversion to a list of MAP's m, on the basis of a
    conversion list for projection variables ps.
    """
    return [MAP(rename_pvar(x[0], lp, gp, ps), rename_pvar(x[1], lp, gp, ps)) for x in m]


## @remarks Universe referents are always renamed, their pointers only when bound.
def rename_universe(u, lp, gp, ps, rs):
    """Applies alpha conversion to a list of PRef's u, on the basis of
    a conversion list for PVar's ps and PDRSRef's rs.
    """
    return [PRef(rename_pvar(r.plabel, lp, gp, ps), rename_var(r.ref, rs)) for r in u]


def _dup(pr, eps, lp, gp):
    # A PRef is duplicate iff some seen PRef shares its referent and is independent of it.
    for prd in eps:
        if pr.ref == prd.ref and pr.test_independent(lp, gp, [prd]):
            return True
    return False


## @remarks A free occurrence also converts when it can access the duplicate context.
def _convert_pref(pr, lp, gp, prs):
    # First matching conversion pair wins.
    for prd, npr in prs:
        if pr == prd:
            return npr
        if pr.ref == prd.ref:
            if pr.has_projected_bound(lp, prd, gp):
                return npr
            if not pr.has_bound(lp, gp) and gp.has_accessible_context(pr.plabel, prd.plabel):
                return npr
    return pr


class MAP(object):
    """A minimally accessible PDRS pair. MAP(1,2) means context 2 is accessible from context 1."""
    def __init__(self, v1, v2):
        if not isinstance(v1, PVar) or not isinstance(v2, PVar):
            raise TypeError
        self._v1 = v1
        self._v2 = v2

    def __ne__(self, other):
        return not self.__eq__(other)

    def __eq__(self, other):
        return type(self) == type(other) and self._v1 == other._v1 and self._v2 == other._v2

    def __len__(self):
        return 2

    def __iter__(self):
        return iter((self._v1, self._v2))

    def __getitem__(self, idx):
        if idx == 0:
            return self._v1
        elif idx == 1:
            return self._v2
        raise IndexError

    def __str__(self):
        return '(%i,%i)' % (self._v1, self._v2)

    def __repr__(self):
        return 'MAP(%i,%i)' % (self._v1, self._v2)

    def __hash__(self):
        return hash(self.__repr__())

    def to_tuple(self):
        return (self._v1, self._v2)

    def to_list(self):
        return [self._v1, self._v2]

    def show(self, notation):
        return u'(%i,%i)' % self.to_tuple()


class PDRSRef(Showable):
    """A PDRS referent"""
    def __init__(self, drsVar):
        if isinstance(drsVar, str):
            drsVar = DRSVar(drsVar)
        elif not isinstance(drsVar, DRSVar):
            raise TypeError
        self._var = drsVar

    def __ne__(self, other):
        return not self.__eq__(other)

    def __eq__(self, other):
        return type(self) == type(other) and self._var == other._var

    def __lt__(self, other):
        return self._var < other._var

    def __repr__(self):
        return 'PDRSRef(%s)' % self._var.to_string()

    def __hash__(self):
        return hash(self.__repr__())

    @property
    def var(self):
        return self._var

    def increase_new(self):
        """Adds a trailing integer to the referent to make it unique."""
        return PDRSRef(self._var.increase_new())

    def show(self, notation):
        return self._var.show(notation)


class PRef(Showable):
    """A projected referent, consisting of a PVar and a PDRSRef"""
    def __init__(self, label, drsRef):
        if isinstance(drsRef, str):
            drsRef = PDRSRef(drsRef)
        if not isinstance(label, PVar) or not isinstance(drsRef, PDRSRef):
            raise TypeError
        self._plabel = label
        self._ref = drsRef

    def __ne__(self, other):
        return not self.__eq__(other)

    def __eq__(self, other):
        return type(self) == type(other) and self._plabel == other._plabel and self._ref == other._ref

    def __repr__(self):
        return 'PRef(%i,%s)' % (self._plabel, repr(self._ref))

    def __hash__(self):
        return hash(self.__repr__())

    def has_bound(self, lp, gp):
        """Test whether this PRef in context lp is bound in the PDRS gp.

        This PRef is bound iff there exists a context pv such that:
        - pv is accessible from the introduction site of this PRef (lp);
        - pv is accessible from the interpretation site of this PRef (its plabel); and
        - together with the referent of this PRef, pv forms a PRef that is introduced in some
          universe in gp.
        """
        if not isinstance(lp, AbstractPDRS) or not isinstance(gp, AbstractPDRS):
            raise TypeError
        for pr in gp.get_universes():
            if pr.ref == self._ref and gp.has_accessible_context(lp.label, pr.plabel) \
                    and gp.has_accessible_context(self._plabel, pr.plabel):
                return True
        return False

    def has_projected_bound(self, lp, pr, gp):
        """Test whether this PRef introduced in local PDRS lp is bound by
        projected referent pr in PDRS gp, where:
        1. this PRef and pr share the same referent; and
        2. pr is part of some universe in gp (i.e., can bind referents); and
        3. the interpretation site of pr is accessible from both the
           introduction and interpretation site of this PRef.
        """
        if not isinstance(pr, PRef) or not isinstance(lp, AbstractPDRS) or not isinstance(gp, AbstractPDRS):
            raise TypeError
        return self._ref == pr.ref and pr in gp.get_universes() and \
               gp.has_accessible_context(self._plabel, pr.plabel) and \
               gp.has_accessible_context(lp.label, pr.plabel)

    ## @remarks Only the first occurrence of this PRef is excluded from the universes.
    def has_other_bound(self, lp, gp):
        """Test whether this PRef is bound by some other universe entry than itself."""
        u = gp.get_universes()
        if self in u:
            u.remove(self)
        return any([self.has_projected_bound(lp, x, gp) for x in u])

    def test_independent(self, lp, gp, prs):
        """Test whether this PRef is independent based on a list of PRef's prs.

        This PRef is not independent w.r.t. prs iff:
        (1) it is bound by any PRef in prs; or
        (2) it occurs free and some element of prs is in a context accessible
            from this PRef's context (both occur free in accessible contexts).
        """
        hb = not self.has_bound(lp, gp)
        for prd in prs:
            if self.has_projected_bound(lp, prd, gp) \
                    or (hb and gp.has_accessible_context(self._plabel, prd.plabel)):
                return False
        return True

    @property
    def var(self):
        return self._ref.var

    @property
    def ref(self):
        return self._ref

    @property
    def plabel(self):
        return self._plabel

    def show(self, notation):
        """Display for screen.

        Args:
            notation: An integer notation.

        Returns:
            A unicode string.
        """
        if notation == SHOW_DEBUG:
            return repr(self)
        return u'(%i,%s)' % (self._plabel, self._ref.show(notation))


class DRSRelation(object):
    """A relation symbol"""
    def __init__(self, name):
        if not isinstance(name, str):
            raise TypeError
        self._name = name

    def __ne__(self, other):
        return not self.__eq__(other)

    def __eq__(self, other):
        return type(self) == type(other) and self._name == other._name

    def __repr__(self):
        return 'DRSRelation(%s)' % self._name

    def __hash__(self):
        return hash(self.__repr__())

    def __str__(self):
        return self._name

    def to_string(self):
        return self._name


class AbstractPDRS(Showable):
    """Projective Discourse Representation Structure base"""

    # Lazily computed, instances are immutable
    _pgraph = None
    _universes_cache = None

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self.__repr__())

    def _edges(self, es):
        # Derives a list of projection graph edges from this PDRS
        return es

    def _universes(self, u):
        return u

    @property
    def label(self):
        """Get the projection label"""
        return 0

    @property
    def islambda(self):
        """Test whether this PDRS is entirely a LambdaPDRS (at its top-level)."""
        return False

    @property
    def ismerge(self):
        """Test whether this PDRS is an AMerge or PMerge (at its top-level)."""
        return False

    @property
    def ispure(self):
        """Test whether this PDRS is pure, where a PDRS is pure iff it does not contain
        any unbound, duplicate uses of projection variables or projected referents.
        """
        return self == self.purify()

    def has_subdrs(self, d):
        """Returns whether d is this PDRS or a direct or indirect sub-PDRS of this PDRS."""
        return self == d

    def get_labels(self, u=None):
        """Returns a list of all the labels in this PDRS."""
        return [] if u is None else u

    def get_pvars(self, u=None):
        """Returns the set of all PVar's in this PDRS."""
        return set() if u is None else u

    def get_variables(self, u=None):
        """Returns the list of all referents in this PDRS."""
        return [] if u is None else u

    def get_universes(self, u=None):
        """Returns the list of PRef's from all universes in this PDRS."""
        if u is not None:
            return self._universes(u)
        if self._universes_cache is None:
            self._universes_cache = tuple(self._universes([]))
        return list(self._universes_cache)

    def get_maps(self, u=None):
        """Returns the list of MAP's of all sub-PDRS's in this PDRS."""
        return [] if u is None else u

    def get_free_pvars(self, gp, u=None):
        """Returns the list of all free PVar's in this PDRS, which is a sub PDRS of global PDRS gp."""
        return [] if u is None else u

    def get_pgraph(self):
        """Derives a projection graph for this PDRS. An edge (p1,p2) means context p2 is
        accessible from context p1.

        Returns:
            A networkx.DiGraph instance
        """
        if self._pgraph is None:
            g = nx.DiGraph()
            g.add_edges_from(self._edges([]))
            self._pgraph = g
        return self._pgraph

    def has_accessible_context(self, p1, p2):
        """Test whether PDRS context p2 is accessible from PDRS context p1 in this PDRS"""
        if p1 == p2:
            return True
        pg = self.get_pgraph()
        return pg.has_node(p1) and pg.has_node(p2) and nx.has_path(pg, p1, p2)

    def test_bound_pvar(self, pv, lp):
        """Test whether a pointer pv in local PDRS lp is bound by a label in this global PDRS."""
        return False

    def test_free_pvar(self, pv):
        """Test whether pv is a free projection variable in this PDRS."""
        return pv in self.get_free_pvars(self)

    def alpha_convert(self, ps, rs=None):
        """Applies alpha conversion to this PDRS on the basis of the conversion list ps for PVar's
        and the conversion list rs for PDRSRef's.

        Args:
            ps: A list of (old,new) integer tuples.
            rs: A list of (old,new) PDRSRef tuples, None is the same as [].

        Returns:
            A PDRS instance.

        Raises:
            ConversionError: if a conversion list is malformed.
        """
        ps = _check_conversions(ps, PVar)
        rs = _check_conversions(rs, PDRSRef)
        return self.rename_subdrs(self, ps, rs)

    def rename_subdrs(self, gd, ps, rs):
        """Applies alpha conversion to this PDRS which is a sub-PDRS of the global PDRS gd,
        on the basis of two conversion lists: PVar's ps and PDRSRef's rs.
        """
        raise NotImplementedError

    def purify_pvars(self, gp, pvs):
        """Replaces duplicate uses of projection variables by new variables.

        Args:
            gp: The global PDRS.
            pvs: The list of projection variables seen so far.

        Returns:
            A tuple of the purified PDRS and the updated list of seen projection variables.
        """
        raise NotImplementedError

    def get_unbound_dup_prefs(self, gp, eps):
        """Returns a tuple of existing PRef's (eps) and unbound duplicate PRef's
        (dps) in this PDRS, based on a list of seen PRef's eps.

        Where pr = PRef(p, r) is duplicate in PDRS gp iff there exists a pd
        such that prd = PRef(pd,r) is an element of eps, and pr and prd are independent.
        """
        raise NotImplementedError

    def purify_refs(self, gd, prs):
        """Replaces duplicate uses of projected referents by new PRef's, based on the conversion
        list of (PRef,PRef) tuples prs.
        """
        raise NotImplementedError

    ## @remarks Not idempotent when a free occurrence can access a renamed duplicate.
    def purify(self):
        """Converts a PDRS into a pure PDRS by first purifying its projection variables,
        and then purifying its projected referents, where a PDRS is pure iff there are no
        occurrences of duplicate, unbound uses of the same PVar or PDRSRef.
        """
        cgp, _ = self.purify_pvars(self, self.get_free_pvars(self))
        _, dps = cgp.get_unbound_dup_prefs(cgp, [])
        dps = remove_dups(dps)
        if len(dps) == 0:
            return cgp
        prs = list(zip(dps, get_new_prefs(dps, cgp.get_variables())))
        _logger.debug('purifying duplicate projected referents %s', prs)
        return cgp.purify_refs(cgp, prs)

    def show(self, notation):
        raise NotImplementedError


class LambdaPDRS(AbstractPDRS):
    """A lambda PDRS: a placeholder for a PDRS supplied later."""
    def __init__(self, lambdaVar, pos=0):
        """A lambda PDRS.

        Args:
            lambdaVar: A DRSVar instance or a string.
            pos: Argument position.
        """
        if isinstance(lambdaVar, str):
            lambdaVar = DRSVar(lambdaVar)
        if not isinstance(lambdaVar, DRSVar) or not isinstance(pos, int):
            raise TypeError
        self._var = lambdaVar
        self._pos = pos

    def __eq__(self, other):
        return type(self) == type(other) and self._var == other._var and self._pos == other._pos

    def __hash__(self):
        return hash(self.__repr__())

    def __repr__(self):
        return 'LambdaPDRS(%s,%i)' % (self._var.to_string(), self._pos)

    @property
    def islambda(self):
        return True

    @property
    def var(self):
        return self._var

    @property
    def pos(self):
        return self._pos

    def rename_subdrs(self, gd, ps, rs):
        return self

    def purify_pvars(self, gp, pvs):
        return self, pvs

    def get_unbound_dup_prefs(self, gp, eps):
        return eps, []

    def purify_refs(self, gd, prs):
        return self

    def show(self, notation):
        if notation == SHOW_DEBUG:
            return repr(self)
        return self._var.show(notation)


class GenericMerge(AbstractPDRS):
    """Common merge pattern"""
    def __init__(self, drsA, drsB):
        if not isinstance(drsA, AbstractPDRS) or not isinstance(drsB, AbstractPDRS):
            raise TypeError
        self._drsA = drsA
        self._drsB = drsB

    def __eq__(self, other):
        return type(self) == type(other) and self._drsA == other._drsA and self._drsB == other._drsB

    def __hash__(self):
        return hash(self.__repr__())

    def __repr__(self):
        return '%s(%s,%s)' % (type(self).__name__, repr(self._drsA), repr(self._drsB))

    def _edges(self, es):
        es = self._drsA._edges(es)
        return self._drsB._edges(es)

    def _universes(self, u):
        u = self._drsA._universes(u)
        return self._drsB._universes(u)

    @property
    def drs_a(self):
        return self._drsA

    @property
    def drs_b(self):
        return self._drsB

    @property
    def label(self):
        """Get the projection label"""
        return self._drsA.label if self._drsB.islambda else self._drsB.label

    @property
    def ismerge(self):
        return True

    @property
    def islambda(self):
        return self._drsA.islambda and self._drsB.islambda

    def has_subdrs(self, d):
        return self == d or self._drsA.has_subdrs(d) or self._drsB.has_subdrs(d)

    def test_bound_pvar(self, pv, lp):
        return self._drsA.test_bound_pvar(pv, lp) or self._drsB.test_bound_pvar(pv, lp)

    def get_labels(self, u=None):
        u = self._drsA.get_labels(u)
        return self._drsB.get_labels(u)

    def get_pvars(self, u=None):
        u = self._drsA.get_pvars(u)
        return self._drsB.get_pvars(u)

    def get_variables(self, u=None):
        u = self._drsA.get_variables(u)
        return self._drsB.get_variables(u)

    def get_maps(self, u=None):
        u = self._drsA.get_maps(u)
        return self._drsB.get_maps(u)

    def get_free_pvars(self, gp, u=None):
        u = self._drsA.get_free_pvars(gp, u)
        return self._drsB.get_free_pvars(gp, u)

    def rename_subdrs(self, gd, ps, rs):
        return type(self)(self._drsA.rename_subdrs(gd, ps, rs), self._drsB.rename_subdrs(gd, ps, rs))

    def purify_pvars(self, gp, pvs):
        cd1, pvs1 = self._drsA.purify_pvars(gp, pvs)
        cd2, pvs2 = self._drsB.purify_pvars(gp, pvs1)
        return type(self)(cd1, cd2), pvs2

    def get_unbound_dup_prefs(self, gp, eps):
        eps1, dps1 = self._drsA.get_unbound_dup_prefs(gp, eps)
        eps2, dps2 = self._drsB.get_unbound_dup_prefs(gp, eps1)
        return eps2, dps1 + dps2

    def purify_refs(self, gd, prs):
        return type(self)(self._drsA.purify_refs(gd, prs), self._drsB.purify_refs(gd, prs))

    def _show_op(self):
        raise NotImplementedError

    def show(self, notation):
        if notation == SHOW_DEBUG:
            return repr(self)
        return u'(' + self._drsA.show(notation) + u' ' + self._show_op() + u' ' + self._drsB.show(notation) + u')'


class AMerge(GenericMerge):
    """An assertive merge between two PDRSs"""
    def __init__(self, drsA, drsB):
        super(AMerge, self).__init__(drsA, drsB)

    def _show_op(self):
        return self.opAMerge


class PMerge(GenericMerge):
    """A projective merge between two PDRSs"""
    def __init__(self, drsA, drsB):
        super(PMerge, self).__init__(drsA, drsB)

    def _show_op(self):
        return self.opPMerge


class PDRS(AbstractPDRS):
    """Projective Discourse Representation Structure.

    A Projected Discourse Representation Structure (PDRS) consists of a PDRS
    label and three sets: a set of MAPs, a set of projected discourse
    referents and a set of projected conditions.

    Pointers of referents and conditions can indicate projection, and the set
    of MAPs can indicate constraints on projection: MAP(1,2) means that 2 is an
    accessible context from 1, i.e., context 1 is weakly subordinate to 2 ("1
    <= 2"). Equivalence between two contexts ("1 = 2") can be represented by
    introducing a reciprocal accessibility relation: MAP(1,2) and MAP(2,1).
    """
    def __init__(self, label, mapper, referents, conditions):
        """Constructor.

        Args:
            label: An integer label
            mapper: A List of MAPS, or integer tuples, indicating constraints on projection.
            referents: A list of projected referents PRef's.
            conditions: A list of projected conditions PCond's.
        """
        if iterable_type_check(mapper, (MAP, tuple)):
            mapper = [MAP(*x) if isinstance(x, tuple) else x for x in mapper]
        if not isinstance(label, PVar) or not iterable_type_check(mapper, MAP) or \
                not iterable_type_check(referents, PRef) or not iterable_type_check(conditions, PCond):
            raise TypeError
        self._label = label
        self._mapper = list(mapper)
        self._refs = list(referents)
        self._conds = list(conditions)

    def __eq__(self, other):
        return type(self) == type(other) and self._label == other._label and self._mapper == other._mapper \
               and self._refs == other._refs and self._conds == other._conds

    def __hash__(self):
        return hash(self.__repr__())

    def __repr__(self):
        return 'PDRS(%i,%s,%s,%s)' % (self._label, repr(self._mapper), repr(self._refs), repr(self._conds))

    def _edges(self, es):
        es.append((self._label, self._label))
        es.extend([m.to_tuple() for m in self._mapper])
        for c in self._conds:
            es = c._edges(es, self._label)
        return es

    def _universes(self, u):
        u.extend(self._refs)
        for c in self._conds:
            u = c._universes(u)
        return u

    @property
    def referents(self):
        return [x for x in self._refs] # shallow copy

    @property
    def universe(self):
        return [x.ref for x in self._refs]

    @property
    def conditions(self):
        return [x for x in self._conds] # shallow copy

    @property
    def label(self):
        return self._label

    @property
    def mapper(self):
        return [x for x in self._mapper] # shallow copy

    def has_subdrs(self, d):
        return self == d or any([c._has_subdrs(d) for c in self._conds])

    def get_labels(self, u=None):
        """Returns a list of all the labels in this PDRS."""
        if u is None:
            u = [self._label]
        else:
            u.append(self._label)
        for c in self._conds:
            u = c._labels(u)
        return u

    def get_pvars(self, u=None):
        """Returns the set of all PVar's in this PDRS"""
        if u is None:
            u = set()
        u.add(self._label)
        for x,y in self._mapper:
            u.add(x)
            u.add(y)
        for r in self._refs:
            u.add(r.plabel)
        for c in self._conds:
            u = c._pvars(u)
        return u

    def get_variables(self, u=None):
        """Returns the list of all referents in this PDRS"""
        if u is None:
            u = []
        u = union_inplace(u, [x.ref for x in self._refs])
        for c in self._conds:
            u = c._variables(u)
        return u

    def get_maps(self, u=None):
        """Returns the list of MAPs of this PDRS and its sub-PDRS's."""
        if u is None:
            u = []
        u = union_inplace(u, self._mapper)
        for c in self._conds:
            u = c._maps(u)
        return u

    def get_free_pvars(self, gp, u=None):
        """Returns the list of all free PVar's in this PDRS, which is a sub PDRS of global PDRS gp."""
        if u is None:
            u = []
        for m in self._mapper:
            u = union_inplace(u, [pv for pv in m if not gp.test_bound_pvar(pv, self)])
        u = union_inplace(u, [r.plabel for r in self._refs if not gp.test_bound_pvar(r.plabel, self)])
        for c in self._conds:
            if not gp.test_bound_pvar(c.plabel, self):
                u = union_inplace(u, [c.plabel])
            u = c._get_free_pvars(gp, u)
        return u

    def test_bound_pvar(self, pv, lp):
        """Test whether a pointer pv in local PDRS lp is bound by a label in this global PDRS.

        Where pv is bound iff:
        - it is equal to the label of either lp or this PDRS; or
        - there exists a PDRS p with label pv, such that p is a sub-PDRS
          of this PDRS and lp is accessible from p.
        """
        if pv == lp.label or pv == self._label:
            return True
        for c in self._conds:
            if c._bound(lp, pv): return True
        return False

    def rename_subdrs(self, gd, ps, rs):
        """Applies alpha conversion to this PDRS which is a sub-PDRS of the global PDRS gd,
        on the basis of two conversion lists: PVar's ps and PDRSRef's rs.

        Args:
            gd: A PDRS|LambdaPDRS|AMerge|PMerge instance.
            ps: A conversion list of integer tuples.
            rs: A conversion list of PDRSRef tuples.

        Returns:
            A PDRS instance.
        """
        return PDRS(rename_var(self._label, ps),
                    rename_mapper(self._mapper, self, gd, ps),
                    rename_universe(self._refs, self, gd, ps, rs),
                    [x._convert(self, gd, ps, rs) for x in self._conds])

    def purify_pvars(self, gp, pvs):
        ol = intersect([self._label], pvs)
        d1 = self
        if len(ol) != 0:
            nps = list(zip(ol, get_new_pvars(ol, union(sorted(gp.get_pvars()), pvs))))
            _logger.debug('renaming duplicate projection label %s', nps)
            d1 = self.alpha_convert(nps)
        pvs1 = [d1._label]
        for m in d1._mapper:
            pvs1 = union_inplace(pvs1, m.to_list())
        pvs1 = union_inplace(pvs1, [r.plabel for r in d1._refs])
        pvs2 = union(pvs, pvs1)
        conds = []
        for c in d1._conds:
            x, pvs2 = c._purify_pvars(gp, pvs2)
            conds.append(x)
        return PDRS(d1._label, d1._mapper, d1._refs, conds), pvs2

    def get_unbound_dup_prefs(self, gp, eps):
        uu = [x for x in self._refs if not x.has_other_bound(self, gp)]
        dps = [x for x in uu if _dup(x, eps, self, gp)]
        eps1 = eps + uu
        # Propositions contribute their referent after all following conditions
        deferred = []
        for c in self._conds:
            eps1, d1, defer = c._dups(self, gp, eps1)
            dps.extend(d1)
            if defer is not None:
                deferred.insert(0, defer)
        for e3, d3 in deferred:
            eps1 = eps1 + e3
            dps.extend(d3)
        return eps1, dps

    def purify_refs(self, gd, prs):
        return PDRS(self._label, self._mapper, [_convert_pref(r, self, gd, prs) for r in self._refs],
                    [c._purify_refs(self, gd, prs) for c in self._conds])

    def show(self, notation):
        """For pretty printing.

        Args:
            notation: An integer notation.

        Returns:
             A unicode string.
        """
        if notation == SHOW_DEBUG:
            return repr(self)
        ul = u','.join([x.show(notation) for x in self._refs])
        cl = u','.join([x.show(notation) for x in self._conds])
        ml = u','.join([x.show(notation) for x in self._mapper])
        if notation == SHOW_SET:
            return u'<%i,{%s},{%s},{%s}>' % (self._label, ul, cl, ml)
        return u'%i:[%s|%s|%s]' % (self._label, ul, cl, ml)


class AbstractPDRSCond(Showable):
    """Abstract PDRS condition, the condition part of a PCond."""

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self.__repr__())

    def _edges(self, es, pv):
        return es

    def _universes(self, u):
        return u

    def _variables(self, u):
        return u

    def _labels(self, u):
        return u

    def _maps(self, u):
        return u

    def _pvars(self, u):
        return u

    def _has_subdrs(self, d):
        return False

    def _bound(self, lp, pv):
        return False

    def _get_free_pvars(self, gp, u):
        return u

    def _convert(self, ld, gd, ps, rs, pv):
        raise NotImplementedError

    def _purify_pvars(self, gp, pv, pvs):
        raise NotImplementedError

    def _dups(self, lp, gp, eps, pv):
        raise NotImplementedError

    def _purify_refs(self, lp, gd, prs, pv):
        raise NotImplementedError


class PCond(Showable):
    """A projected condition, consisting of a PVar and a AbstractPDRSCond."""
    def __init__(self, label, cond):
        if not isinstance(label, PVar) or not isinstance(cond, AbstractPDRSCond):
            raise TypeError
        self._plabel = label
        self._cond = cond

    def __ne__(self, other):
        return not self.__eq__(other)

    def __eq__(self, other):
        return type(self) == type(other) and self._plabel == other._plabel and self._cond == other._cond

    def __repr__(self):
        return 'PCond(%i,%s)' % (self._plabel, repr(self._cond))

    def __hash__(self):
        return hash(self.__repr__())

    # Pass down to member condition with this pointer.

    def _edges(self, es, pv):
        es.append((pv, self._plabel))
        return self._cond._edges(es, self._plabel)

    def _universes(self, u):
        return self._cond._universes(u)

    def _variables(self, u):
        return self._cond._variables(u)

    def _labels(self, u):
        return self._cond._labels(u)

    def _maps(self, u):
        return self._cond._maps(u)

    def _pvars(self, u):
        u.add(self._plabel)
        return self._cond._pvars(u)

    def _has_subdrs(self, d):
        return self._cond._has_subdrs(d)

    def _bound(self, lp, pv):
        return self._cond._bound(lp, pv)

    def _get_free_pvars(self, gp, u):
        return self._cond._get_free_pvars(gp, u)

    def _convert(self, ld, gd, ps, rs):
        pv = rename_pvar(self._plabel, ld, gd, ps)
        return PCond(pv, self._cond._convert(ld, gd, ps, rs, pv))

    def _purify_pvars(self, gp, pvs):
        cond, pvs = self._cond._purify_pvars(gp, self._plabel, pvs)
        return PCond(self._plabel, cond), pvs

    def _dups(self, lp, gp, eps):
        return self._cond._dups(lp, gp, eps, self._plabel)

    def _purify_refs(self, lp, gd, prs):
        return PCond(self._plabel, self._cond._purify_refs(lp, gd, prs, self._plabel))

    @property
    def plabel(self):
        return self._plabel

    @property
    def condition(self):
        return self._cond

    def show(self, notation):
        if notation == SHOW_DEBUG:
            return repr(self)
        return u'(%i,%s)' % (self._plabel, self._cond.show(notation))


class PRel(AbstractPDRSCond):
    """A relation defined on a set of referents"""
    def __init__(self, drsRel, drsRefs):
        if isinstance(drsRel, str):
            drsRel = DRSRelation(drsRel)
        if not isinstance(drsRel, DRSRelation):
            raise TypeError
        drsRefs = [PDRSRef(x) if isinstance(x, str) else x for x in drsRefs]
        if not iterable_type_check(drsRefs, PDRSRef):
            raise TypeError
        self._rel = drsRel
        self._refs = drsRefs

    def __eq__(self, other):
        return type(self) == type(other) and self._rel == other._rel and self._refs == other._refs

    def __hash__(self):
        return hash(self.__repr__())

    def __repr__(self):
        return 'PRel(%s,%s)' % (repr(self._rel), repr(self._refs))

    def _variables(self, u):
        return union_inplace(u, self._refs)

    def _convert(self, ld, gd, ps, rs, pv):
        return PRel(self._rel, [rename_pdrsref(pv, r, ld, gd, rs) for r in self._refs])

    def _purify_pvars(self, gp, pv, pvs):
        return self, union(pvs, [pv])

    def _dups(self, lp, gp, eps, pv):
        upd = [x for x in [PRef(pv, r) for r in self._refs] if not x.has_other_bound(lp, gp)]
        dps = [x for x in upd if _dup(x, eps, lp, gp)]
        return eps + upd, dps, None

    def _purify_refs(self, lp, gd, prs, pv):
        return PRel(self._rel, [_convert_pref(PRef(pv, r), lp, gd, prs).ref for r in self._refs])

    @property
    def relation(self):
        return self._rel

    @property
    def referents(self):
        return [x for x in self._refs]

    def show(self, notation):
        return self._rel.to_string() + u'(' + u','.join([x.show(notation) for x in self._refs]) + u')'


class _UnaryPDRSCond(AbstractPDRSCond):
    """A condition on a single sub-PDRS."""
    opSymbol = u''

    def __init__(self, drs):
        if not isinstance(drs, AbstractPDRS):
            raise TypeError
        self._drs = drs

    def __eq__(self, other):
        return type(self) == type(other) and self._drs == other._drs

    def __hash__(self):
        return hash(self.__repr__())

    def __repr__(self):
        return '%s(%s)' % (type(self).__name__, repr(self._drs))

    def _edges(self, es, pv):
        if not self._drs.islambda:
            es.append((self._drs.label, pv))
        return self._drs._edges(es)

    def _universes(self, u):
        return self._drs._universes(u)

    def _variables(self, u):
        return self._drs.get_variables(u)

    def _labels(self, u):
        return self._drs.get_labels(u)

    def _maps(self, u):
        return self._drs.get_maps(u)

    def _pvars(self, u):
        return self._drs.get_pvars(u)

    def _has_subdrs(self, d):
        return self._drs.has_subdrs(d)

    def _bound(self, lp, pv):
        return self._drs.has_subdrs(lp) and self._drs.test_bound_pvar(pv, lp)

    def _get_free_pvars(self, gp, u):
        return self._drs.get_free_pvars(gp, u)

    def _convert(self, ld, gd, ps, rs, pv):
        return type(self)(self._drs.rename_subdrs(gd, ps, rs))

    def _purify_pvars(self, gp, pv, pvs):
        cp1, pvs1 = self._drs.purify_pvars(gp, union(pvs, [pv]))
        return type(self)(cp1), pvs1

    def _dups(self, lp, gp, eps, pv):
        eps1, dps1 = self._drs.get_unbound_dup_prefs(gp, eps)
        return eps1, dps1, None

    def _purify_refs(self, lp, gd, prs, pv):
        return type(self)(self._drs.purify_refs(gd, prs))

    @property
    def drs(self):
        return self._drs

    def show(self, notation):
        return self.opSymbol + self._drs.show(notation)


class PNeg(_UnaryPDRSCond):
    """A negated PDRS"""
    opSymbol = Showable.opNeg


class PDiamond(_UnaryPDRSCond):
    """A possible PDRS"""
    opSymbol = Showable.opDiamond


class PBox(_UnaryPDRSCond):
    """A necessary PDRS"""
    opSymbol = Showable.opBox


class PProp(_UnaryPDRSCond):
    """A proposition PDRS"""
    def __init__(self, drsRef, drs):
        super(PProp, self).__init__(drs)
        if isinstance(drsRef, str):
            drsRef = PDRSRef(drsRef)
        if not isinstance(drsRef, PDRSRef):
            raise TypeError
        self._ref = drsRef

    def __eq__(self, other):
        return type(self) == type(other) and self._ref == other._ref and self._drs == other._drs

    def __hash__(self):
        return hash(self.__repr__())

    def __repr__(self):
        return 'PProp(%s,%s)' % (repr(self._ref), repr(self._drs))

    def _variables(self, u):
        u = union_inplace(u, [self._ref])
        return self._drs.get_variables(u)

    def _convert(self, ld, gd, ps, rs, pv):
        return PProp(rename_pdrsref(pv, self._ref, ld, gd, rs), self._drs.rename_subdrs(gd, ps, rs))

    def _purify_pvars(self, gp, pv, pvs):
        cp1, pvs1 = self._drs.purify_pvars(gp, union(pvs, [pv]))
        return PProp(self._ref, cp1), pvs1

    def _dups(self, lp, gp, eps, pv):
        eps1, dps1 = self._drs.get_unbound_dup_prefs(gp, eps)
        pr = PRef(pv, self._ref)
        upd = [] if pr.has_other_bound(lp, gp) else [pr]
        # Checked against the PRef's seen before this proposition, added after the following conditions
        return eps1, dps1, (upd, [x for x in [pr] if _dup(x, eps, lp, gp)])

    def _purify_refs(self, lp, gd, prs, pv):
        return PProp(_convert_pref(PRef(pv, self._ref), lp, gd, prs).ref, self._drs.purify_refs(gd, prs))

    @property
    def referent(self):
        return self._ref

    def show(self, notation):
        return self._ref.show(notation) + u': ' + self._drs.show(notation)


class _BinaryPDRSCond(AbstractPDRSCond):
    """A condition on two sub-PDRS's."""
    opSymbol = u''

    def __init__(self, drsA, drsB):
        if not isinstance(drsA, AbstractPDRS) or not isinstance(drsB, AbstractPDRS):
            raise TypeError
        self._drsA = drsA
        self._drsB = drsB

    def __eq__(self, other):
        return type(self) == type(other) and self._drsA == other._drsA and self._drsB == other._drsB

    def __hash__(self):
        return hash(self.__repr__())

    def __repr__(self):
        return '%s(%s,%s)' % (type(self).__name__, repr(self._drsA), repr(self._drsB))

    def _edges(self, es, pv):
        if not self._drsA.islambda:
            es.append((self._drsA.label, pv))
        es = self._drsA._edges(es)
        if not self._drsB.islambda:
            es.append((self._drsB.label, pv))
        return self._drsB._edges(es)

    def _universes(self, u):
        u = self._drsA._universes(u)
        return self._drsB._universes(u)

    def _variables(self, u):
        u = self._drsA.get_variables(u)
        return self._drsB.get_variables(u)

    def _labels(self, u):
        u = self._drsA.get_labels(u)
        return self._drsB.get_labels(u)

    def _maps(self, u):
        u = self._drsA.get_maps(u)
        return self._drsB.get_maps(u)

    def _pvars(self, u):
        u = self._drsA.get_pvars(u)
        return self._drsB.get_pvars(u)

    def _has_subdrs(self, d):
        return self._drsA.has_subdrs(d) or self._drsB.has_subdrs(d)

    def _bound(self, lp, pv):
        return (self._drsA.has_subdrs(lp) and self._drsA.test_bound_pvar(pv, lp)) \
               or (self._drsB.has_subdrs(lp) and self._drsB.test_bound_pvar(pv, lp))

    def _get_free_pvars(self, gp, u):
        u = self._drsA.get_free_pvars(gp, u)
        return self._drsB.get_free_pvars(gp, u)

    def _convert(self, ld, gd, ps, rs, pv):
        return type(self)(self._drsA.rename_subdrs(gd, ps, rs), self._drsB.rename_subdrs(gd, ps, rs))

    def _purify_pvars(self, gp, pv, pvs):
        # Only the label of the left operand is renamed up front
        pvs1 = union(pvs, [pv])
        drsA = self._drsA
        drsB = self._drsB
        ops = [] if drsA.islambda else intersect([drsA.label], pvs1)
        if len(ops) != 0:
            nps = list(zip(ops, get_new_pvars(ops, union(sorted(gp.get_pvars()), pvs))))
            _logger.debug('renaming duplicate projection label %s', nps)
            drsA = drsA.rename_subdrs(gp, nps, [])
            drsB = drsB.rename_subdrs(gp, nps, [])
        cp1, pvs2 = drsA.purify_pvars(gp, pvs1)
        cp2, pvs3 = drsB.purify_pvars(gp, pvs2)
        return type(self)(cp1, cp2), pvs3

    def _dups(self, lp, gp, eps, pv):
        eps1, dps1 = self._drsA.get_unbound_dup_prefs(gp, eps)
        eps2, dps2 = self._drsB.get_unbound_dup_prefs(gp, eps1)
        return eps2, dps1 + dps2, None

    def _purify_refs(self, lp, gd, prs, pv):
        return type(self)(self._drsA.purify_refs(gd, prs), self._drsB.purify_refs(gd, prs))

    def show(self, notation):
        return self._drsA.show(notation) + u' ' + self.opSymbol + u' ' + self._drsB.show(notation)


class PImp(_BinaryPDRSCond):
    """An implication between two PDRSs"""
    opSymbol = Showable.opImp

    def _edges(self, es, pv):
        # The consequent is subordinate to the antecedent
        if not self._drsA.islambda:
            es.append((self._drsA.label, pv))
        es = self._drsA._edges(es)
        if not self._drsB.islambda:
            es.append((self._drsB.label, pv if self._drsA.islambda else self._drsA.label))
        return self._drsB._edges(es)

    def _bound(self, lp, pv):
        return (pv == self._drsA.label and self._drsB.has_subdrs(lp)) \
               or super(PImp, self)._bound(lp, pv)

    @property
    def antecedent(self):
        return self._drsA

    @property
    def consequent(self):
        return self._drsB


class POr(_BinaryPDRSCond):
    """A disjunction between two PDRSs"""
    opSymbol = Showable.opOr

    @property
    def drs_a(self):
        return self._drsA

    @property
    def drs_b(self):
        return self._drsB
