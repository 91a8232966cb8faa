from __future__ import annotations


class CnabError(RuntimeError):
    pass


class CnabReadError(CnabError):
    pass


class CnabFileNotFoundError(CnabReadError):
    pass


class CnabEncodingError(CnabReadError):
    pass


class UnsupportedSegmentError(CnabError):
    pass


class InvalidRangeError(CnabError, ValueError):
    pass


class InvalidQueryError(CnabError, ValueError):
    pass


class ExportError(CnabError):
    pass
