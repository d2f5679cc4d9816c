"""Exceptions raised by the QA system"""


class NgramQAError(Exception):
    """Base class for all errors raised by ngram_qa"""


class DictionaryConstructionError(NgramQAError):
    """The backing store of a dictionary could not be opened or initialized"""


class DictionaryClosedError(NgramQAError):
    """A dictionary was used after close()"""


class ImportSourceError(NgramQAError):
    """An import source could not be read"""
