# -*- coding: utf-8 -*-


class PDRSError(Exception):
    """Base class for PDRS manipulation errors."""
    pass


class ConversionError(PDRSError):
    """Malformed alpha conversion list."""
    pass

