import re


## @defgroup showtypes Show notation
## @see Showable
## @{

## Display in linear format
SHOW_LINEAR = 1

## Display in set format
SHOW_SET = 2

## Display in debug format
SHOW_DEBUG = 3
## @}


class Showable(object):
    """Like haskell show"""

    ## @cond

    # Symbols
    opNeg = u"¬"
    opImp = u"⇒"
    opOr = u"∨"
    opDiamond = u"◇"
    opBox = u"◻"
    opLambda = u"λ"
    opAMerge = u"+"
    opPMerge = u"*"

    ## @endcond

    def __str__(self):
        return self.show(SHOW_LINEAR)

    def show(self, notation):
        """Display for screen.

        Args:
            notation: An integer notation.

        Returns:
            A unicode string.
        """
        raise NotImplementedError


_VARIDX = re.compile(r'^(.*?[^0-9])([1-9][0-9]*)$')


class DRSVar(Showable):
    """A referent variable: a name with an optional numeric suffix."""
    def __init__(self, name, idx=0):
        if not isinstance(name, str) or len(name) == 0 or not isinstance(idx, int):
            raise TypeError
        if idx == 0:
            m = _VARIDX.match(name)
            if m is not None:
                name = m.group(1)
                idx = int(m.group(2))
        elif name[-1].isdigit():
            # Keep the index apart from a name ending in a digit
            name += u'_'
        self._name = name
        self._idx = idx

    def __repr__(self):
        return 'DRSVar(%s)' % self.to_string()

    def __eq__(self, other):
        return type(self) == type(other) and self._name == other._name and self._idx == other._idx

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self._idx) ^ hash(self._name)

    def __lt__(self, other):
        return self._name < other._name or (self._name == other._name and self._idx < other._idx)

    def __le__(self, other):
        return self == other or self < other

    def __gt__(self, other):
        return not self.__le__(other)

    def __ge__(self, other):
        return not self.__lt__(other)

    def increase_new(self):
        return DRSVar(self._name, self._idx + 1)

    ## @property idx
    @property
    def idx(self):
        return self._idx

    ## @property name
    @property
    def name(self):
        return self._name

    def show(self, notation):
        return self.to_string()

    def to_string(self):
        if self._idx == 0: return self._name
        return '%s%i' % (self._name, self._idx)
