"""Import of surface forms from tab-separated files"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from ..core.errors import ImportSourceError

logger = logging.getLogger(__name__)


def parse_tsv_lines(
    lines: Iterable[str],
    skipped: Optional[List[int]] = None
) -> Iterator[Tuple[str, str]]:
    """
    Parse surface-form lines into (entity, surface_form) pairs

    Format: ENTITY[TAB]FORM1[TAB]FORM2...
    Example: "http://dbpedia.org/resource/Bill_Gates\tbill gates\tgates"

    Blank lines are skipped silently, lines without an entity or without any
    surface form are skipped with a warning.

    Args:
        lines: Text lines (e.g. an open file)
        skipped: Optional list receiving the numbers of malformed lines
    """
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue

        fields = line.split("\t")
        entity = fields[0].strip()
        forms = [form.strip() for form in fields[1:] if form.strip()]

        if not entity or not forms:
            logger.warning("Skipping malformed line %d: %r", line_number, line[:80])
            if skipped is not None:
                skipped.append(line_number)
            continue

        for form in forms:
            yield entity, form


class TsvImportSource:
    """
    Iterable over the (entity, surface_form) pairs of a TSV file

    The file is opened lazily on every iteration, so an unreadable file
    surfaces as an ImportSourceError while iterating. skipped_lines holds
    the malformed line numbers of the latest iteration.
    """

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self.skipped_lines: List[int] = []

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        logger.debug("Reading surface forms from %s", self.path)
        self.skipped_lines = []
        try:
            with open(self.path, "r", encoding=self.encoding) as f:
                yield from parse_tsv_lines(f, self.skipped_lines)
        except (OSError, UnicodeDecodeError) as e:
            raise ImportSourceError(f"Cannot read {self.path}: {e}") from e

    def __repr__(self):
        return f"TsvImportSource(path='{self.path}')"
