from typing import Any, Dict, Optional

from attr import Factory, attrs
from xlsxwriter import Workbook as XlsxWriterWorkbook
from xlsxwriter.format import Format


class FormatDict(Dict[str, Any]):
    """A special variant of vanilla dictionary that implements __or__ and __hash__. Used to create and merge option
    sets and formats, keys on the right side of `|` win.

    Examples:
        >>> F = FormatDict
        >>> F1 = F({'bold': True, 'wrap': True})
        >>> F2 = F({'bold': False})
        >>> F1 | F2 == F({'bold': False, 'wrap': True})
        True
        >>> {'bold': True} | F2 == F2
        True
        >>> hash(F1) == hash(F({'wrap': True, 'bold': True}))
        True
    """

    def __or__(self, other):
        return FormatDict({
            **self,
            **other
        })

    def __ror__(self, other):
        return FormatDict({
            **other,
            **self
        })

    def __hash__(self):
        return hash((*sorted(self.items()),))


@attrs(auto_attribs=True)
class FormatHandler(object):
    """This object is used to handle adding new formats when necessary. Only one should be used per Workbook."""
    target: XlsxWriterWorkbook
    _memoized: Dict[int, Format] = Factory(dict)

    def verify_format(self, format_: FormatDict) -> Optional[Format]:
        if not format_:
            return None

        hashed = hash(format_)
        if hashed not in self._memoized:
            self._memoized[hashed] = self.target.add_format(format_)
        return self._memoized[hashed]
