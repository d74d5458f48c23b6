"""
TrueType / OpenType font metadata
reads the table directory, the OS/2 weight class and the name table strings
of a single sfnt font, collections (ttcf) are not handled
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import NamedTuple

from fonterrors import MissingRequiredTable
from fontreader import FontFileReader

OS2 = "OS/2"
NAME = "name"
# not a legal 4 character tag, cannot clash with a real table
TABLE_DIRECTORY = "tableDirectory"

PLATFORM_MACINTOSH = 1
PLATFORM_WINDOWS = 3
LANGUAGE_WINDOWS_EN_US = 1033

NAME_COPYRIGHT = 0
NAME_FAMILY = 1
NAME_SUBFAMILY = 2
NAME_FULL_NAME = 4
NAME_POSTSCRIPT = 6
NAME_TYPOGRAPHIC_FAMILY = 16

NAME_RECORD_SIZE = 12


def table_name(tag: bytes | str) -> str:
    """
    canonical directory key for a table tag
    tags are case sensitive and may end in spaces, so they are kept as is
    """
    if isinstance(tag, bytes):
        return tag.decode("latin-1")
    return tag


@dataclass(frozen=True)
class DirectoryEntry:
    tag: str
    offset: int
    length: int

    @classmethod
    def read(cls, reader: FontFileReader) -> "DirectoryEntry":
        """
        read one 16 byte table record (tag, checksum, offset, length)
        """
        tag = table_name(reader.read_tag())
        reader.read_ulong()  # checksum
        offset = reader.read_ulong()
        length = reader.read_ulong()
        return cls(tag, offset, length)


class NameRecord(NamedTuple):
    platform_id: int
    encoding_id: int
    language_id: int
    name_id: int
    length: int
    offset: int

    @classmethod
    def read(cls, reader: FontFileReader) -> "NameRecord":
        return cls(*(reader.read_ushort() for _ in range(6)))

    @property
    def accepted(self) -> bool:
        """
        macintosh roman or windows symbol / unicode BMP
        """
        platforms = (PLATFORM_MACINTOSH, PLATFORM_WINDOWS)
        return self.platform_id in platforms and self.encoding_id in (0, 1)


def _first_wins(current: str, record: NameRecord) -> bool:
    return not current


def _full_name_wins(current: str, record: NameRecord) -> bool:
    # a windows US english full name replaces anything seen before it
    if not current:
        return True
    return record.platform_id == PLATFORM_WINDOWS and record.language_id == LANGUAGE_WINDOWS_EN_US


# name id -> (attribute, should the record replace the current value)
NAME_FIELDS = {
    NAME_COPYRIGHT: ("_notice", _first_wins),
    NAME_SUBFAMILY: ("_subfamily_name", _first_wins),
    NAME_FULL_NAME: ("_full_name", _full_name_wins),
    NAME_POSTSCRIPT: ("_postscript_name", _first_wins),
}
FAMILY_NAME_IDS = {NAME_FAMILY, NAME_TYPOGRAPHIC_FAMILY}


class TTFFile:
    """
    metadata of one font, everything is parsed when the object is built
    and nothing changes afterwards
    """

    def __init__(self, reader: FontFileReader):
        self._reader = reader
        self._dir_tabs: dict[str, DirectoryEntry] = {}
        self._family_names: set[str] = set()
        self._full_name = ""
        self._postscript_name = ""
        self._subfamily_name = ""
        self._notice = ""
        self._weight_class = 0

        self.read_dir_tabs()
        self.read_os2()
        self.read_name()

    @classmethod
    def open(cls, source) -> "TTFFile":
        """
        read a font from a path, a binary stream or bytes
        """
        return cls(FontFileReader(source))

    @property
    def reader(self) -> FontFileReader:
        return self._reader

    @property
    def directory(self):
        return MappingProxyType(self._dir_tabs)

    @property
    def family_names(self) -> frozenset[str]:
        return frozenset(self._family_names)

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def postscript_name(self) -> str:
        return self._postscript_name

    @property
    def subfamily_name(self) -> str:
        return self._subfamily_name

    @property
    def notice(self) -> str:
        return self._notice

    @property
    def weight_class(self) -> int:
        """
        usWeightClass from OS/2 (100, 200 ... 900), 0 when the font has no OS/2 table
        """
        return self._weight_class

    def read_dir_tabs(self):
        """
        read the table directory at the start of the file
        a tableDirectory entry covering the directory itself is added at the end
        """
        reader = self._reader
        reader.read_long()  # sfnt version
        num_tables = reader.read_ushort()
        reader.skip(6)  # searchRange, entrySelector, rangeShift

        for _ in range(num_tables):
            entry = DirectoryEntry.read(reader)
            self._dir_tabs[entry.tag] = entry
        self._dir_tabs[TABLE_DIRECTORY] = DirectoryEntry(TABLE_DIRECTORY, 0, reader.position)

    def seek_tab(self, name: str, offset: int = 0) -> bool:
        """
        position the reader offset bytes into a table
        returns False if the font has no such table
        """
        entry = self._dir_tabs.get(name)
        if entry is None:
            return False
        self._reader.seek(entry.offset + offset)
        return True

    def read_os2(self):
        if not self.seek_tab(OS2):
            return
        self._reader.read_ushort()  # version
        self._reader.skip(2)  # xAvgCharWidth
        self._weight_class = self._reader.read_ushort()

    def read_name(self):
        reader = self._reader
        if not self.seek_tab(NAME, 2):
            raise MissingRequiredTable(NAME)

        table_start = reader.position
        count = reader.read_ushort()
        storage = table_start - 2 + reader.read_ushort()
        records_start = table_start + 4

        for i in range(count):
            reader.seek(records_start + NAME_RECORD_SIZE * i)
            record = NameRecord.read(reader)
            if not record.accepted:
                continue

            with reader.excursion(storage + record.offset):
                if record.platform_id == PLATFORM_WINDOWS:
                    text = reader.read_string(record.length, record.encoding_id)
                else:
                    text = reader.read_string(record.length)
            self._merge_name(record, text)

    def _merge_name(self, record: NameRecord, text: str):
        if record.name_id in FAMILY_NAME_IDS:
            self._family_names.add(text)
            return
        field = NAME_FIELDS.get(record.name_id)
        if field is None:
            return
        attr, replaces = field
        if replaces(getattr(self, attr), record):
            setattr(self, attr, text)

    def to_dict(self) -> dict:
        return {
            "family_names": sorted(self._family_names),
            "full_name": self._full_name,
            "postscript_name": self._postscript_name,
            "subfamily_name": self._subfamily_name,
            "notice": self._notice,
            "weight_class": self._weight_class,
        }

    def __repr__(self):
        return f"<TTFFile {self._full_name or self._postscript_name or '?'!r}>"
