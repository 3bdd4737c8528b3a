# -*- coding: utf-8 -*-
from pdrt import isdebugging


DPRINT_ON = False or isdebugging()


def dprint(*args, **kwargs):
    global DPRINT_ON
    if DPRINT_ON:
        print(*args, **kwargs)
