import logging
import re
from datetime import date, time
from numbers import Real
from typing import Any, Mapping, Optional, Tuple
from urllib.parse import urlparse

from .cursor import Cursor
from .formats import FormatDict
from .options import OptionCascade, apply_cell_options, apply_range_options, extract_comment
from .ranges import RangeTracker
from .sheet import AUTO_WIDTH, DocumentProperties, WorkbookModel, WorksheetModel
from .utils import MAX_LABELED_COLUMN, column_to_label, normalize_positive, normalize_span, to_column_and_row, to_coords

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[\w.!#$%&'*+/=?^`{|}~-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+$")


def _hyperlink_target(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    if _EMAIL_RE.match(value):
        return f'mailto:{value}'

    parsed = urlparse(value)
    if parsed.scheme and parsed.netloc:
        return value
    return None


def _count_lines(value: Any) -> int:
    """Number of lines of a multiline string, 0 for anything else."""
    if isinstance(value, str) and '\n' in value:
        return len(value.split('\n'))
    return 0


class XTable(object):
    """
    A writer that fills sheets cell by cell, left to right and top to bottom, keeping track of the position itself.

    Every write lands at the cursor and moves it right by the number of spanned columns, :func:`next_row` goes back
    to `start_column` of the next row. Formatting options are merged from three tiers, see :class:`OptionCascade`:
    global options (:func:`set_global_cell_options`), options of the current row (:func:`set_row_options`, forgotten
    on every row break) and options of a single :func:`add_value` call.

    Nothing is written to disk until :func:`save` is called.

    Parameters:
        start_row: Row where every sheet starts being filled, one-based
        start_column: Column where every row starts being filled, zero-based (0 = A, 1 = B...)
        sheet_title: Name of the first sheet, cut to 31 characters
        properties: Workbook metadata, see :class:`DocumentProperties` for the accepted keys, others are ignored
    """

    def __init__(
            self,
            start_row: int = 1,
            start_column: int = 0,
            sheet_title: Optional[str] = None,
            **properties
    ):
        self.cursor = Cursor(start_row, start_column)
        self.ranges = RangeTracker()
        self.workbook = WorkbookModel(DocumentProperties.from_options(**properties))
        self.global_options = FormatDict()
        self.row_options = FormatDict()
        self.default_font_size: Optional[int] = None
        self.debug = False

        self.sheet_no = 0
        self.sheet: WorksheetModel = self.workbook.active_sheet

        if sheet_title is not None and sheet_title.strip():
            self.sheet.set_title(sheet_title.strip())

    def debug_on(self):
        """Log every write at DEBUG level."""
        self.debug = True

    def debug_off(self):
        self.debug = False

    @property
    def row(self) -> int:
        return self.cursor.row

    @property
    def column(self) -> int:
        return self.cursor.column

    @property
    def max_column(self) -> int:
        return self.cursor.max_column

    def add_value(self, value: Any, colspan: int = 1, options: Optional[Mapping[str, Any]] = None) -> 'XTable':
        """Write `value` into the current cell, spanning `colspan` columns, and move right past it.

        Text containing a newline gets wrapped, like Excel does when typing ALT+Enter.
        """
        if not isinstance(value, (str, Real, date, time)) and value is not None:
            value = str(value)

        coords = self.cursor.coords
        if self.debug:
            logger.debug("Writing %r at (r:%d, c:%d) aka %s", value, self.row, self.column, coords)

        self.sheet.set_cell_value(self.column, self.row, value)

        if isinstance(value, str) and '\n' in value:
            self.sheet.get_style(coords).set_alignment(wrap=True)

        self._apply_cell_options(coords, options)

        colspan = normalize_span(colspan)
        if colspan > 1:
            self.sheet.merge_cells(f"{coords}:{self.to_coords(column=self.column + colspan - 1)}")

        self.cursor.advance(colspan)
        return self

    def skip(self, num: int = 1) -> 'XTable':
        """Move `num` cells right without writing anything."""
        self.cursor.skip(num)
        return self

    def next_row(self) -> 'XTable':
        """Go to `start_column` of the next row and forget the row options."""
        self.cursor.break_row()
        self.row_options = FormatDict()
        return self

    def set_row_options(self, options: Optional[Mapping[str, Any]] = None) -> 'XTable':
        """Replace current row options, ``height`` is applied to the row right away."""
        self.row_options = FormatDict(options or {})

        height = normalize_positive(self.row_options.get('height'))
        if height:
            self.sheet.set_row_height(self.row, height)

        return self

    def set_current_row_options(self, options: Optional[Mapping[str, Any]] = None) -> 'XTable':
        """Replace current row options without touching the row height."""
        self.row_options = FormatDict(options or {})
        return self

    def set_global_cell_options(self, options: Optional[Mapping[str, Any]] = None) -> 'XTable':
        """Replace the options applied to every cell written from now on."""
        self.global_options = FormatDict(options or {})
        return self

    def set_default_font_size(self, size):
        """Font size for cells written from now on that have no ``font-size`` option. Ignored unless above 1."""
        if isinstance(size, Real) and not isinstance(size, bool) and size > 1:
            self.default_font_size = size

    def column_number_to_column_name(self, column: Optional[int] = None) -> str:
        """Letter coordinate of `column`, the cursor's column by default. Only A..ZZ are supported."""
        return column_to_label(self.column if column is None else column)

    def to_coords(self, row: Optional[int] = None, column: Optional[int] = None) -> str:
        """Cell coordinates like ``B3``, the cursor's row and column fill in whatever is missing."""
        return to_coords(
            self.row if row is None else row,
            self.column if column is None else column
        )

    @staticmethod
    def to_column_and_row(coords: str) -> Tuple[int, int]:
        return to_column_and_row(coords)

    def start_range(self, coords: Optional[str] = None):
        """Open a range at `coords`, the cursor's cell by default."""
        self.ranges.start(coords or self.cursor.coords)

    def end_range(self, coords: Optional[str] = None):
        """Close the range at `coords`, by default the cell left of the cursor, where the last write ended.

        If there is no open range, this opens one instead (at `coords` or the cursor's cell).
        """
        default = self.ranges.is_opened and self.cursor.previous_coords or self.cursor.coords
        self.ranges.end(coords or default)

    def reset_range(self):
        self.ranges.reset()

    def set_range_options(self, options: Optional[Mapping[str, Any]] = None):
        """Apply border and font `options` to the range and forget it, see :func:`apply_range_options`.

        An open range is closed first. Without any range, a range is opened at the cursor instead and nothing is
        applied, the next call will apply to it. Without options the range is kept.
        """
        if not self.ranges.is_closed:
            self.end_range()

        if not self.ranges.is_closed or not options:
            return

        address = self.ranges.consume()
        if self.debug:
            logger.debug("Applying %r to range %s", options, address)
        apply_range_options(self.sheet.get_style(address), options)

    def auto_size_all_columns(self) -> 'XTable':
        """Fit every column used in this sheet that has no explicit width to its contents, up to ZZ."""
        for column in range(min(self.max_column, MAX_LABELED_COLUMN + 1)):
            label = column_to_label(column)
            if self.sheet.get_column_width(label) is None:
                self.sheet.set_column_width(label, AUTO_WIDTH)

        return self

    def auto_size_row(self, row_height: float = 12):
        """Size the current row by the number of lines in its cells, `row_height` points per line."""
        lines = [
            _count_lines(self.sheet.get_cell_value(column, self.row))
            for column in range(self.column)
        ]
        factor = max(lines, default=0) + 1

        if factor > 1:
            self.sheet.set_row_height(self.row, row_height * factor)

    def set_column_options(self, column_no: int, options: Optional[Mapping[str, Any]] = None) -> 'XTable':
        """Reset the width of `column_no` (one-based) and set ``width`` from `options` if it's a positive number."""
        if normalize_positive(column_no) is None:
            return self

        label = column_to_label(int(column_no) - 1)
        self.sheet.set_column_width(label, None)

        width = normalize_positive((options or {}).get('width'))
        if width:
            self.sheet.set_column_width(label, width)

        return self

    def set_sheet_header(self, content: Optional[str]) -> bool:
        """Set the printed page header, empty `content` is refused."""
        if not content:
            return False
        self.sheet.header = content
        return True

    def set_sheet_footer(self, content: Optional[str]) -> bool:
        """Set the printed page footer, empty `content` is refused."""
        if not content:
            return False
        self.sheet.footer = content
        return True

    def get_sheet_header(self) -> Optional[str]:
        return self.sheet.header

    def get_sheet_footer(self) -> Optional[str]:
        return self.sheet.footer

    def add_and_switch_to_sheet(self, title: Optional[str] = None, show_lines: Optional[bool] = None) -> 'XTable':
        """Add a new sheet at the end and continue writing there."""
        self.workbook.create_sheet()
        self.switch_to_sheet(len(self.workbook.sheets) - 1)

        if title is not None:
            self.sheet.set_title(title)
        if show_lines is not None:
            self.sheet.show_gridlines = bool(show_lines)

        return self

    def switch_to_sheet(self, sheet_no: int) -> 'XTable':
        """Continue writing in sheet number `sheet_no` (zero-based).

        The cursor keeps its row and column, but the furthest column seen and any pending range are forgotten.
        """
        self.sheet = self.workbook.set_active_sheet(sheet_no)
        self.sheet_no = sheet_no
        self.cursor.reset_max_column()
        self.ranges.reset()

        return self

    def save(self, target, options: Optional[Mapping[str, Any]] = None):
        """Write the workbook to `target`, a filename or a binary file object. `options` go to XlsxWriter."""
        self.workbook.save(target, dict(options or {}))

    def _apply_cell_options(self, coords: str, options: Optional[Mapping[str, Any]]):
        effective = OptionCascade(self.global_options, self.row_options, options).resolve()
        if not effective and self.default_font_size is None:
            return

        apply_cell_options(self.sheet.get_style(coords), effective, self.default_font_size)

        runs, width, height = extract_comment(effective)
        if runs:
            self.sheet.set_comment(coords, runs, width, height)

        if effective.get('hyperlink'):
            url = _hyperlink_target(self.sheet.get_cell_value(self.column, self.row))
            if url is not None:
                self.sheet.set_hyperlink(coords, url)
