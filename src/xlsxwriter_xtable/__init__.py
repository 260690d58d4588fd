"""A stateful writer for XlsxWriter workbooks that fills sheets the way one types into a spreadsheet: cell after cell,
row after row, with a cursor doing the coordinate bookkeeping. Formatting options cascade from global options, over
options of the current row, to options of a single write, and rectangular ranges can be collected while writing and
bordered or restyled at once. See `XTable` to get started."""

from . import borders, cursor, errors, formats, options, ranges, sheet, utils, xtable

from .options import OptionCascade
from .sheet import DocumentProperties, WorkbookModel, WorksheetModel
from .xtable import XTable

__all__ = [
    'borders', 'cursor', 'errors', 'formats', 'options', 'ranges', 'sheet', 'utils', 'xtable',
    'OptionCascade', 'DocumentProperties', 'WorkbookModel', 'WorksheetModel', 'XTable',
]
