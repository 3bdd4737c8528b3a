# -*- coding: utf-8 -*-
import unittest
from ..pdrs import *
from ..common import *
from ..exception import ConversionError
from . import dprint


X = PDRSRef('x')
X1 = PDRSRef('x1')
Y = PDRSRef('y')


def rel(name, *refs):
    return PRel(DRSRelation(name), list(refs))


def happy_man():
    # "A man is happy."
    return PDRS(1, [], [PRef(1, X)], [PCond(1, rel('man', X)), PCond(1, rel('happy', X))])


def the_man_is_happy():
    # "The man is happy." The man is presupposed in context 2.
    return PDRS(1, [], [PRef(2, X)], [PCond(2, rel('man', X)), PCond(1, rel('happy', X))])


def farmer_donkey():
    # "If a farmer exists he is happy."
    return PDRS(1, [], [], [PCond(1, PImp(PDRS(2, [], [PRef(2, X)], [PCond(2, rel('farmer', X))]),
                                          PDRS(3, [], [], [PCond(3, rel('happy', X))])))])


class PDrsTest(unittest.TestCase):

    def test0_Empty(self):
        d = PDRS(1, [], [], [])
        self.assertEqual(u'<1,{},{},{}>', d.show(SHOW_SET))
        self.assertEqual(u'1:[||]', d.show(SHOW_LINEAR))
        self.assertEqual(u'1:[||]', str(d))
        self.assertEqual([], d.get_free_pvars(d))
        self.assertEqual(d, d.purify())

    def test1_HappyMan(self):
        d = happy_man()
        s = d.show(SHOW_SET)
        x = u'<1,{(1,x)},{(1,man(x)),(1,happy(x))},{}>'
        self.assertEqual(x, s)
        s = d.show(SHOW_LINEAR)
        x = u'1:[(1,x)|(1,man(x)),(1,happy(x))|]'
        self.assertEqual(x, s)
        self.assertFalse(d.islambda)
        self.assertFalse(d.ismerge)
        self.assertTrue(d.ispure)
        self.assertEqual([X], d.get_variables())
        self.assertEqual([PRef(1, X)], d.get_universes())
        self.assertEqual({1}, d.get_pvars())

    def test2_Equality(self):
        self.assertEqual(happy_man(), happy_man())
        self.assertEqual(hash(happy_man()), hash(happy_man()))
        # Condition order matters
        d = PDRS(1, [], [PRef(1, X)], [PCond(1, rel('happy', X)), PCond(1, rel('man', X))])
        self.assertNotEqual(happy_man(), d)
        self.assertNotEqual(rel('love', X, Y), rel('love', Y, X))
        self.assertEqual(PRel('man', ['x']), rel('man', X))
        self.assertEqual(PDRS(1, [(1, 2)], [], []), PDRS(1, [MAP(1, 2)], [], []))

    def test3_TypeChecks(self):
        self.assertRaises(TypeError, PDRS, '1', [], [], [])
        self.assertRaises(TypeError, PDRS, 1, [], [X], [])
        self.assertRaises(TypeError, PDRS, 1, [], [], [rel('man', X)])
        self.assertRaises(TypeError, PCond, 1, happy_man())
        self.assertRaises(TypeError, PNeg, rel('man', X))
        self.assertRaises(TypeError, AMerge, happy_man(), X)

    def test4_ProjectionGraph(self):
        d = PDRS(1, [MAP(1, 3)], [PRef(2, X)], [PCond(2, rel('man', X)), PCond(1, rel('happy', X))])
        self.assertTrue(d.has_accessible_context(1, 2))
        self.assertFalse(d.has_accessible_context(2, 1))
        self.assertTrue(d.has_accessible_context(1, 3))
        self.assertFalse(d.has_accessible_context(3, 1))
        self.assertTrue(d.has_accessible_context(5, 5))
        self.assertFalse(d.has_accessible_context(1, 5))
        self.assertEqual([3, 2], d.get_free_pvars(d))
        self.assertTrue(d.test_free_pvar(2))
        self.assertFalse(d.test_free_pvar(1))

    def test5_ImplicationAccessibility(self):
        d = farmer_donkey()
        ant = d.conditions[0].condition.antecedent
        con = d.conditions[0].condition.consequent
        self.assertTrue(d.has_accessible_context(3, 2))
        self.assertTrue(d.has_accessible_context(3, 1))
        self.assertTrue(d.has_accessible_context(2, 1))
        self.assertFalse(d.has_accessible_context(2, 3))
        self.assertTrue(d.test_bound_pvar(2, con))
        self.assertFalse(d.test_bound_pvar(3, ant))
        self.assertTrue(PRef(3, X).has_bound(con, d))
        self.assertFalse(PRef(1, X).has_bound(d, d))
        self.assertEqual([1, 2, 3], d.get_labels())
        self.assertEqual({1, 2, 3}, d.get_pvars())
        self.assertEqual([], d.get_free_pvars(d))
        self.assertTrue(d.has_subdrs(con))
        self.assertFalse(ant.has_subdrs(con))

    def test6_NewVariables(self):
        self.assertEqual([1, 2], get_new_pvars([1, 2], []))
        self.assertEqual([6, 7], get_new_pvars([1, 2], [3, 5]))
        self.assertEqual(X1, X.increase_new())
        self.assertEqual(PDRSRef(DRSVar('x', 1)), X1)
        self.assertEqual([PDRSRef('x2')], get_new_drsrefs([X], [X1]))
        self.assertEqual([X1, PDRSRef('y1')], get_new_drsrefs([X, Y], [X, Y]))
        self.assertEqual([PDRSRef('x2'), PDRSRef('x3')], get_new_drsrefs([X, X1], []))
        self.assertEqual([PRef(3, X1)], get_new_prefs([PRef(3, X)], [X]))

    def test7_AlphaConvertReferents(self):
        d = PDRS(1, [MAP(1, 2)], [PRef(1, X)], [PCond(1, rel('man', X)), PCond(2, rel('happy', X))])
        a = d.alpha_convert([], [(X, Y)])
        # happy(x) in context 2 is not bound by the universe of context 1
        x = PDRS(1, [MAP(1, 2)], [PRef(1, Y)], [PCond(1, rel('man', Y)), PCond(2, rel('happy', X))])
        dprint(a)
        self.assertEqual(x, a)

    def test8_AlphaConvertPVars(self):
        d = PDRS(1, [MAP(1, 2)], [PRef(1, X)], [PCond(1, rel('man', X)), PCond(2, rel('happy', X))])
        a = d.alpha_convert([(1, 5), (2, 6)])
        # 2 is free so it is kept
        x = PDRS(5, [MAP(5, 2)], [PRef(5, X)], [PCond(5, rel('man', X)), PCond(2, rel('happy', X))])
        self.assertEqual(x, a)
        # First matching pair wins
        self.assertEqual(PDRS(5, [], [], []), PDRS(1, [], [], []).alpha_convert([(1, 5), (1, 7)]))

    def test9_AlphaConvertIdentity(self):
        for d in [happy_man(), the_man_is_happy(), farmer_donkey(), AMerge(happy_man(), the_man_is_happy())]:
            self.assertEqual(d, d.alpha_convert([], []))
        lp = LambdaPDRS('K')
        self.assertEqual(lp, lp.alpha_convert([(1, 2)], [(X, Y)]))
        self.assertRaises(ConversionError, happy_man().alpha_convert, [(1, 'a')], [])
        self.assertRaises(ConversionError, happy_man().alpha_convert, [], [('x', 'y')])
        self.assertRaises(ConversionError, happy_man().alpha_convert, [1, 2], [])

    def test10_AlphaConvertNested(self):
        d = farmer_donkey()
        a = d.alpha_convert([(2, 4)], [(X, Y)])
        x = PDRS(1, [], [], [PCond(1, PImp(PDRS(4, [], [PRef(4, Y)], [PCond(4, rel('farmer', X))]),
                                          PDRS(3, [], [], [PCond(3, rel('happy', Y))])))])
        # farmer(x) has its pointer renamed, so its binding is not seen under the old label
        self.assertEqual(x, a)

    def test11_PurifyMerge(self):
        d = AMerge(PDRS(1, [], [PRef(1, X)], [PCond(1, rel('man', X))]),
                   PDRS(1, [], [PRef(1, X)], [PCond(1, rel('happy', X))]))
        p = d.purify()
        x = AMerge(PDRS(1, [], [PRef(1, X)], [PCond(1, rel('man', X))]),
                   PDRS(2, [], [PRef(2, X1)], [PCond(2, rel('happy', X1))]))
        dprint(p)
        self.assertEqual(x, p)
        self.assertEqual(2, p.label)
        self.assertEqual(u'(1:[(1,x)|(1,man(x))|] + 2:[(2,x1)|(2,happy(x1))|])', p.show(SHOW_LINEAR))
        self.assertEqual(p, p.purify())
        self.assertFalse(d.ispure)
        self.assertTrue(p.ispure)

    def test12_PurifyDistinctReferents(self):
        d = AMerge(PDRS(1, [], [PRef(1, X)], [PCond(1, rel('man', X))]),
                   PDRS(1, [], [PRef(1, Y)], [PCond(1, rel('happy', Y))]))
        x = AMerge(PDRS(1, [], [PRef(1, X)], [PCond(1, rel('man', X))]),
                   PDRS(2, [], [PRef(2, Y)], [PCond(2, rel('happy', Y))]))
        self.assertEqual(x, d.purify())

    def test13_PurifySiblingNegations(self):
        d = PDRS(1, [], [], [PCond(1, PNeg(PDRS(2, [], [PRef(2, X)], [PCond(2, rel('man', X))]))),
                             PCond(1, PNeg(PDRS(3, [], [PRef(3, X)], [PCond(3, rel('happy', X))])))])
        x = PDRS(1, [], [], [PCond(1, PNeg(PDRS(2, [], [PRef(2, X)], [PCond(2, rel('man', X))]))),
                             PCond(1, PNeg(PDRS(3, [], [PRef(3, X1)], [PCond(3, rel('happy', X1))])))])
        p = d.purify()
        self.assertEqual(x, p)
        self.assertEqual(p, p.purify())
        self.assertEqual(u'1:[|(1,¬2:[(2,x)|(2,man(x))|]),(1,¬3:[(3,x1)|(3,happy(x1))|])|]',
                         p.show(SHOW_LINEAR))

    def test14_PurifyBoundRedeclaration(self):
        # A redeclaration in an accessible context is bound by the outer referent
        d = PDRS(1, [], [PRef(1, X)], [PCond(1, rel('man', X)),
                                       PCond(1, PNeg(PDRS(2, [], [PRef(2, X)], [PCond(2, rel('happy', X))])))])
        self.assertEqual(d, d.purify())

    def test15_PurifyPresupposition(self):
        d = the_man_is_happy()
        p = d.purify()
        self.assertEqual(d, p)
        self.assertEqual([2], d.get_free_pvars(d))
        self.assertEqual([2], p.get_free_pvars(p))

    def test16_PurifyLabelCollidingWithFreePointer(self):
        d = PDRS(1, [], [PRef(2, X)], [PCond(2, rel('man', X)),
                                       PCond(1, PNeg(PDRS(2, [], [], [PCond(2, rel('happy', X))])))])
        x = PDRS(1, [], [PRef(2, X)], [PCond(2, rel('man', X)),
                                       PCond(1, PNeg(PDRS(3, [], [], [PCond(3, rel('happy', X))])))])
        p = d.purify()
        self.assertEqual(x, p)
        self.assertEqual(d.get_free_pvars(d), p.get_free_pvars(p))

    def test17_PurifyImplication(self):
        d = PDRS(1, [], [], [PCond(1, PImp(PDRS(1, [], [PRef(1, X)], [PCond(1, rel('farmer', X))]),
                                          PDRS(3, [], [], [PCond(3, rel('feeds', X))])))])
        x = PDRS(1, [], [], [PCond(1, PImp(PDRS(4, [], [PRef(4, X)], [PCond(4, rel('farmer', X))]),
                                          PDRS(3, [], [], [PCond(3, rel('feeds', X))])))])
        self.assertEqual(x, d.purify())
        self.assertTrue(farmer_donkey().ispure)

    def test18_PurifyLambda(self):
        lp = LambdaPDRS('K')
        self.assertEqual(lp, lp.purify())
        d = AMerge(lp, happy_man())
        self.assertEqual(1, d.label)
        self.assertEqual(d, d.purify())
        self.assertTrue(AMerge(lp, LambdaPDRS('Q', 1)).islambda)
        self.assertEqual(u'(K + 1:[(1,x)|(1,man(x)),(1,happy(x))|])', d.show(SHOW_LINEAR))

    def test19_PurifyInaccessibleOuterReferent(self):
        # x in context 5 cannot be seen from the negation, so the nested x is renamed
        d = PDRS(1, [], [PRef(5, X)], [PCond(1, PNeg(PDRS(2, [], [PRef(2, X)], [PCond(2, rel('happy', X))])))])
        x = PDRS(1, [], [PRef(5, X)], [PCond(1, PNeg(PDRS(2, [], [PRef(2, X1)], [PCond(2, rel('happy', X1))])))])
        p = d.purify()
        self.assertEqual(x, p)
        self.assertEqual(u'1:[(5,x)|(1,¬2:[(2,x1)|(2,happy(x1))|])|]', p.show(SHOW_LINEAR))

    def test20_PurifyFreeOccurrenceNotIdempotent(self):
        # y is free in both contexts and 4 is accessible from 2, so both occurrences
        # are renamed together and stay duplicates on every pass.
        y1 = PDRSRef('y1')
        y2 = PDRSRef('y2')
        d = PDRS(2, [], [], [PCond(2, rel('r', Y, X)), PCond(4, rel('r', Y))])
        p1 = d.purify()
        self.assertEqual(PDRS(2, [], [], [PCond(2, rel('r', y1, X)), PCond(4, rel('r', y1))]), p1)
        self.assertEqual(PDRS(2, [], [], [PCond(2, rel('r', y2, X)), PCond(4, rel('r', y2))]), p1.purify())
        self.assertFalse(p1.ispure)

    def test21_PurifyMergeSiblingLabel(self):
        # 4 counts as bound through the right operand, so it is renamed and becomes free
        d = PMerge(PDRS(3, [MAP(3, 4)], [], []), PDRS(4, [], [PRef(4, Y)], []))
        p = d.purify()
        self.assertEqual(PMerge(PDRS(3, [MAP(3, 4)], [], []), PDRS(5, [], [PRef(5, Y)], [])), p)
        self.assertEqual([], d.get_free_pvars(d))
        self.assertEqual([4], p.get_free_pvars(p))

    def test22_ReferentIndexAfterDigit(self):
        r = PDRSRef('x0').increase_new()
        self.assertEqual(u'x0_1', r.show(SHOW_LINEAR))
        self.assertNotEqual(PDRSRef('x01'), r)
        self.assertEqual(u'x01', PDRSRef('x01').show(SHOW_LINEAR))
        self.assertEqual(PDRSRef('x0_1'), r)
        self.assertEqual(PDRSRef('x0_2'), r.increase_new())
        self.assertEqual(DRSVar('x0', 1), DRSVar('x0_', 1))


if __name__ == '__main__':
    unittest.main()
