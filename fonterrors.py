"""
Exceptions raised while reading font files
every one of them aborts the extraction of the font being read
"""


class FontError(Exception):
    """
    base class for font reading failures
    """


class EndOfData(FontError, EOFError):
    """
    a read or seek would cross the end of the font image
    """

    def __init__(self, size: int, offset: int, wanted: int = 0):
        self.size = size
        self.offset = offset
        self.wanted = wanted
        if wanted:
            msg = f"Reached EOF reading {wanted} bytes at offset {offset}, file size={size}"
        else:
            msg = f"Reached EOF, file size={size} offset={offset}"
        super().__init__(msg)


class MissingRequiredTable(FontError):
    def __init__(self, table: str):
        self.table = table
        super().__init__(f"font has no '{table}' table")


class SourceUnavailable(FontError, OSError):
    """
    the byte source could not be opened or read to the end
    """
