"""In-memory spreadsheet model the XTable session writes into, and its rendering through XlsxWriter.

XlsxWriter wants every cell's format at the time the cell is written, while the session keeps restyling cells
(ranges are bordered after their cells were written), so cells, styles, merges and the rest are collected
in a :class:`WorksheetModel` first and handed to XlsxWriter in one go when the :class:`WorkbookModel` is saved.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from os import PathLike, fspath
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from attr import Factory, attrib, attrs, fields
from xlsxwriter import Workbook
from xlsxwriter.utility import xl_cell_to_rowcol
from xlsxwriter.worksheet import Worksheet

from .borders import BORDER_STYLES, EDGES, Bounds, BorderSpec
from .errors import RenderXTableError, SheetXTableError, XTableError
from .formats import FormatDict, FormatHandler
from .utils import is_coords

logger = logging.getLogger(__name__)

CellKey = Tuple[int, int]  # (one-based row, zero-based column)

AUTO_WIDTH = 'auto'
MAX_TITLE_LENGTH = 31

HORIZONTAL_ALIGNMENTS = {
    'general': None,
    'left': 'left',
    'right': 'right',
    'center': 'center',
    'centerContinuous': 'center_across',
    'justify': 'justify',
}

VERTICAL_ALIGNMENTS = {
    'bottom': 'bottom',
    'center': 'vcenter',
    'justify': 'vjustify',
    'top': 'top',
}

_RETURN_CODE_MESSAGES = {
    -1: 'Write failed because the cell is out of the worksheet bounds',
    -2: 'Write failed because the string is longer than 32k characters',
    -3: 'Write failed because the URL is longer than 2079 characters long',
    -4: 'Write failed because there are more than 65530 URLs in the sheet',
}


def parse_coords(coords: str) -> Optional[CellKey]:
    """``B3`` -> ``(3, 1)``, None for anything that is not a cell coordinate, like labels of columns past ZZ."""
    if not is_coords(coords):
        return None

    row, col = xl_cell_to_rowcol(coords.strip().upper())
    return row + 1, col


def parse_range(address: str) -> Optional[Bounds]:
    """``C3:A1`` -> ``(1, 0, 3, 2)``, corners are normalized so the first one is the top left."""
    first, _, last = address.partition(':')
    start, end = parse_coords(first), parse_coords(last or first)
    if start is None or end is None:
        return None

    (row_1, col_1), (row_2, col_2) = start, end
    return min(row_1, row_2), min(col_1, col_2), max(row_1, row_2), max(col_1, col_2)


def _argb_to_hex(argb: str) -> str:
    return f'#{argb[-6:]}'


@attrs(auto_attribs=True)
class CellStyle(object):
    """Style handle of a single cell. Fields left as None were never touched and are not rendered."""
    fill_color: Optional[str] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    subscript: Optional[bool] = None
    superscript: Optional[bool] = None
    font_size: Optional[int] = None
    wrap: Optional[bool] = None
    horizontal: Optional[str] = None
    vertical: Optional[str] = None
    borders: Dict[str, Tuple[str, str]] = Factory(dict)

    def set_fill(self, argb: str):
        """Solid fill with `argb` color."""
        self.fill_color = argb

    def set_font(self, bold=None, italic=None, underline=None, strikethrough=None,
                 subscript=None, superscript=None, size=None):
        if bold is not None:
            self.bold = bool(bold)
        if italic is not None:
            self.italic = bool(italic)
        if underline is not None:
            self.underline = bool(underline)
        if strikethrough is not None:
            self.strikethrough = bool(strikethrough)
        # Subscript and superscript exclude each other
        if subscript is not None:
            self.subscript = bool(subscript)
            if subscript:
                self.superscript = False
        if superscript is not None:
            self.superscript = bool(superscript)
            if superscript:
                self.subscript = False
        if size is not None:
            self.font_size = int(size)

    def set_alignment(self, wrap=None, horizontal=None, vertical=None):
        """Unknown alignment names are ignored."""
        if wrap is not None:
            self.wrap = bool(wrap)
        if horizontal in HORIZONTAL_ALIGNMENTS:
            self.horizontal = horizontal
        if vertical in VERTICAL_ALIGNMENTS:
            self.vertical = vertical

    def set_border(self, edge: str, style: str, color: str):
        if edge in EDGES and style in BORDER_STYLES:
            self.borders[edge] = (style, color)

    def to_format(self) -> FormatDict:
        """Translate the touched fields into XlsxWriter format properties."""
        result = FormatDict()

        if self.fill_color is not None:
            result['pattern'] = 1
            result['bg_color'] = _argb_to_hex(self.fill_color)
        if self.bold is not None:
            result['bold'] = self.bold
        if self.italic is not None:
            result['italic'] = self.italic
        if self.underline is not None:
            result['underline'] = self.underline and 1 or 0
        if self.strikethrough is not None:
            result['font_strikeout'] = self.strikethrough
        if self.superscript:
            result['font_script'] = 1
        elif self.subscript:
            result['font_script'] = 2
        elif self.superscript is not None or self.subscript is not None:
            result['font_script'] = 0
        if self.font_size is not None:
            result['font_size'] = self.font_size
        if self.wrap is not None:
            result['text_wrap'] = self.wrap
        if HORIZONTAL_ALIGNMENTS.get(self.horizontal) is not None:
            result['align'] = HORIZONTAL_ALIGNMENTS[self.horizontal]
        if self.vertical is not None:
            result['valign'] = VERTICAL_ALIGNMENTS[self.vertical]
        for edge, (style, color) in self.borders.items():
            result[edge] = BORDER_STYLES[style]
            result[f'{edge}_color'] = _argb_to_hex(color)

        return result


@attrs(auto_attribs=True)
class RangeStyle(object):
    """Style handle of a rectangular range, every mutation is applied to each of its cells."""
    bounds: Bounds
    cells: Dict[CellKey, CellStyle]

    def set_fill(self, argb: str):
        for style in self.cells.values():
            style.set_fill(argb)

    def set_font(self, **font):
        for style in self.cells.values():
            style.set_font(**font)

    def set_alignment(self, wrap=None, horizontal=None, vertical=None):
        for style in self.cells.values():
            style.set_alignment(wrap, horizontal, vertical)

    def set_border(self, edge: str, style: str, color: str):
        for cell_style in self.cells.values():
            cell_style.set_border(edge, style, color)

    def apply_border(self, spec: BorderSpec):
        """Distribute `spec` over the cells according to its edge selector."""
        for (row, col), style in self.cells.items():
            for edge in spec.edges_at(row, col, self.bounds):
                style.set_border(edge, spec.style, spec.color)


@attrs(auto_attribs=True, frozen=True)
class CommentRun(object):
    """One line of comment text."""
    text: str
    bold: bool = False


@attrs(auto_attribs=True)
class Comment(object):
    """A cell comment, `width` and `height` are in points."""
    runs: List[CommentRun] = Factory(list)
    width: Optional[float] = None
    height: Optional[float] = None

    @property
    def text(self) -> str:
        return '\n'.join(run.text for run in self.runs)

    def to_options(self) -> Dict[str, float]:
        # XlsxWriter sizes comment boxes in pixels, 4 pixels per 3 points
        options = {}
        if self.width is not None:
            options['width'] = self.width * 4 / 3
        if self.height is not None:
            options['height'] = self.height * 4 / 3
        return options


class SheetAdapter(ABC):
    """The operations the XTable session needs from a worksheet."""

    @property
    @abstractmethod
    def title(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def set_title(self, title: str):
        raise NotImplementedError

    @abstractmethod
    def set_cell_value(self, column: int, row: int, value: Any):
        raise NotImplementedError

    @abstractmethod
    def get_cell_value(self, column: int, row: int) -> Any:
        raise NotImplementedError

    @abstractmethod
    def get_style(self, coords: str) -> Union[CellStyle, RangeStyle]:
        """Style handle for a cell like ``B3`` or a range like ``A1:C3``, created if missing."""
        raise NotImplementedError

    @abstractmethod
    def merge_cells(self, address: str):
        raise NotImplementedError

    @abstractmethod
    def get_column_width(self, label: str) -> Union[float, str, None]:
        raise NotImplementedError

    @abstractmethod
    def set_column_width(self, label: str, width: Union[float, str, None]):
        """Set column width, ``'auto'`` to fit contents or None to go back to the default width."""
        raise NotImplementedError

    @abstractmethod
    def get_row_height(self, row: int) -> Optional[float]:
        raise NotImplementedError

    @abstractmethod
    def set_row_height(self, row: int, height: float):
        raise NotImplementedError

    @abstractmethod
    def set_comment(self, coords: str, runs: List[CommentRun], width=None, height=None):
        raise NotImplementedError

    @abstractmethod
    def set_hyperlink(self, coords: str, url: str):
        raise NotImplementedError


class WorksheetModel(SheetAdapter):
    """A worksheet kept in memory until it's rendered into an XlsxWriter :class:`Worksheet`."""

    def __init__(self, title: str):
        self._title = title[:MAX_TITLE_LENGTH]
        self.values: Dict[CellKey, Any] = {}
        self.styles: Dict[CellKey, CellStyle] = {}
        self.merges: List[Bounds] = []
        self.column_widths: Dict[str, Union[float, str]] = {}
        self.row_heights: Dict[int, float] = {}
        self.comments: Dict[CellKey, Comment] = {}
        self.hyperlinks: Dict[CellKey, str] = {}
        self.header: Optional[str] = None
        self.footer: Optional[str] = None
        self.show_gridlines = True

    @property
    def title(self) -> str:
        return self._title

    def set_title(self, title: str):
        self._title = title[:MAX_TITLE_LENGTH]

    def set_cell_value(self, column: int, row: int, value: Any):
        self.values[(row, column)] = value

    def get_cell_value(self, column: int, row: int) -> Any:
        return self.values.get((row, column))

    def _cell_style(self, key: CellKey) -> CellStyle:
        if key not in self.styles:
            self.styles[key] = CellStyle()
        return self.styles[key]

    def _ignore(self, what: str, coords: str):
        logger.warning("Ignoring %s at %r of sheet %r, it is not a cell address", what, coords, self.title)

    def get_style(self, coords: str) -> Union[CellStyle, RangeStyle]:
        """Cells that can't be addressed get a detached style that is never rendered."""
        if ':' not in coords:
            key = parse_coords(coords)
            if key is None:
                self._ignore('style', coords)
                return CellStyle()
            return self._cell_style(key)

        bounds = parse_range(coords)
        if bounds is None:
            self._ignore('style', coords)
            return RangeStyle((0, 0, 0, 0), {})

        first_row, first_col, last_row, last_col = bounds
        return RangeStyle(bounds, {
            (row, col): self._cell_style((row, col))
            for row in range(first_row, last_row + 1)
            for col in range(first_col, last_col + 1)
        })

    def merge_cells(self, address: str):
        bounds = parse_range(address)
        if bounds is None:
            self._ignore('merge', address)
            return

        first_row, first_col, last_row, last_col = bounds
        if (first_row, first_col) == (last_row, last_col):
            return
        if bounds not in self.merges:
            self.merges.append(bounds)

    def get_column_width(self, label: str) -> Union[float, str, None]:
        return self.column_widths.get(label)

    def set_column_width(self, label: str, width: Union[float, str, None]):
        if width is None:
            self.column_widths.pop(label, None)
        else:
            self.column_widths[label] = width

    def get_row_height(self, row: int) -> Optional[float]:
        return self.row_heights.get(row)

    def set_row_height(self, row: int, height: float):
        self.row_heights[row] = height

    def set_comment(self, coords: str, runs: List[CommentRun], width=None, height=None):
        """Append `runs` to the cell's comment, creating it if necessary."""
        key = parse_coords(coords)
        if key is None:
            self._ignore('comment', coords)
            return

        comment = self.comments.setdefault(key, Comment())
        comment.runs.extend(runs)
        if width is not None:
            comment.width = width
        if height is not None:
            comment.height = height

    def set_hyperlink(self, coords: str, url: str):
        key = parse_coords(coords)
        if key is None:
            self._ignore('hyperlink', coords)
            return

        self.hyperlinks[key] = url

    def _merge_index(self) -> Dict[CellKey, Bounds]:
        index = {}
        for bounds in self.merges:
            first_row, first_col, last_row, last_col = bounds
            for row in range(first_row, last_row + 1):
                for col in range(first_col, last_col + 1):
                    index[(row, col)] = bounds
        return index

    def _cells(self) -> Iterator[CellKey]:
        # Left-to-right, top-to-bottom
        return iter(sorted({*self.values, *self.styles, *self.hyperlinks}))

    def render(self, ws: Worksheet, formats: FormatHandler):
        """Write everything collected so far into `ws`."""

        def check(return_code, key, data):
            if return_code is not None and return_code < 0:
                raise RenderXTableError(
                    _RETURN_CODE_MESSAGES.get(return_code, f'Write failed with code {return_code}'),
                    self.title,
                    key,
                    data
                )

        if not self.show_gridlines:
            ws.hide_gridlines(2)
        if self.header:
            ws.set_header(self.header)
        if self.footer:
            ws.set_footer(self.footer)

        for row, height in sorted(self.row_heights.items()):
            ws.set_row(row - 1, height)

        merge_index = self._merge_index()
        for key in self._cells():
            row, col = key
            value = self.values.get(key)
            fmt = formats.verify_format(self.styles.get(key, CellStyle()).to_format())
            url = self.hyperlinks.get(key)
            bounds = merge_index.get(key)

            if bounds is not None and (row, col) == bounds[:2]:
                check(ws.merge_range(
                    bounds[0] - 1, bounds[1], bounds[2] - 1, bounds[3],
                    '' if value is None else value,
                    fmt
                ), key, value)
                if url is not None:
                    check(ws.write_url(row - 1, col, url, fmt, None if value is None else str(value)), key, url)
            elif bounds is not None:
                # Merge ranges fill their cells with blanks, restyled cells need to be written over them
                if fmt is not None:
                    check(ws.write_blank(row - 1, col, None, fmt), key, None)
            elif url is not None:
                check(ws.write_url(row - 1, col, url, fmt, None if value is None else str(value)), key, url)
            elif value is None:
                if fmt is not None:
                    check(ws.write_blank(row - 1, col, None, fmt), key, None)
            else:
                check(ws.write(row - 1, col, value, fmt), key, value)

        # Fits every column to its contents, so explicit widths have to come after it
        if AUTO_WIDTH in self.column_widths.values():
            ws.autofit()
        for label, width in self.column_widths.items():
            key = parse_coords(f'{label}1')
            if key is None:
                self._ignore('column width', label)
            elif width != AUTO_WIDTH:
                ws.set_column(key[1], key[1], width)

        for (row, col), comment in sorted(self.comments.items()):
            if any(run.bold for run in comment.runs):
                logger.warning(
                    "Comment at %s of sheet %r has bold lines, XlsxWriter comments are plain text",
                    (row, col), self.title
                )
            check(ws.write_comment(row - 1, col, comment.text, comment.to_options()), (row, col), comment.text)


def _join_keywords(keywords):
    if keywords is None or isinstance(keywords, str):
        return keywords
    return ', '.join(keywords) or None


def _strip(value):
    return value.strip() if isinstance(value, str) else value


@attrs(auto_attribs=True)
class DocumentProperties(object):
    """Workbook metadata.

    Attributes:
        creator: Workbook author
        title: Workbook title, not a sheet name
        subject: Workbook subject
        description: Workbook description, defaults to the generation date and time
        keywords: A list of keywords, stored joined with commas
        category: Workbook category
    """
    creator: Optional[str] = attrib(default=None, converter=_strip)
    title: Optional[str] = attrib(default=None, converter=_strip)
    subject: Optional[str] = attrib(default=None, converter=_strip)
    description: Optional[str] = attrib(
        default=Factory(lambda: f'Generated on {datetime.now():%Y-%m-%d %H:%M:%S}'),
        converter=_strip
    )
    keywords: Optional[str] = attrib(default=None, converter=_join_keywords)
    category: Optional[str] = attrib(default=None, converter=_strip)

    @classmethod
    def from_options(cls, **options) -> 'DocumentProperties':
        """Build properties out of `options`, logging and skipping keys that are not properties."""
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            logger.warning("Ignoring unsupported document properties: %s", ', '.join(unknown))

        return cls(**{key: value for key, value in options.items() if key in known})

    def to_xlsxwriter(self) -> Dict[str, str]:
        return {
            key: value
            for key, value in (
                ('author', self.creator),
                ('title', self.title),
                ('subject', self.subject),
                ('comments', self.description),
                ('keywords', self.keywords),
                ('category', self.category),
            )
            if value is not None
        }


class WorkbookModel(object):
    """An ordered set of :class:`WorksheetModel` with one of them active. Starts with one sheet."""

    def __init__(self, properties: Optional[DocumentProperties] = None):
        self.properties = properties or DocumentProperties()
        self.sheets: List[WorksheetModel] = []
        self.active_index = 0
        self.create_sheet()

    def create_sheet(self) -> WorksheetModel:
        """Append a new sheet, the active sheet does not change."""
        sheet = WorksheetModel(f'Sheet{len(self.sheets) + 1}')
        self.sheets.append(sheet)
        return sheet

    def set_active_sheet(self, index: int) -> WorksheetModel:
        if not isinstance(index, int) or not 0 <= index < len(self.sheets):
            raise SheetXTableError(
                f'Sheet {index} does not exist, there are {len(self.sheets)} sheets',
                sheet=index
            )
        self.active_index = index
        return self.sheets[index]

    @property
    def active_sheet(self) -> WorksheetModel:
        return self.sheets[self.active_index]

    def render(self, workbook: Workbook) -> List[Worksheet]:
        """Render properties and every sheet into an open XlsxWriter `workbook`."""
        formats = FormatHandler(workbook)
        workbook.set_properties(self.properties.to_xlsxwriter())

        result = []
        for sheet in self.sheets:
            try:
                ws = workbook.add_worksheet(sheet.title)
                sheet.render(ws, formats)
            except XTableError:
                raise
            except Exception as e:
                raise RenderXTableError('Uncaught exception', sheet.title) from e
            result.append(ws)

        result[self.active_index].activate()
        return result

    def save(self, target: Union[str, PathLike, Any], options: Optional[Dict[str, Any]] = None):
        """Render the workbook into `target`, a filename or a writable binary file object."""
        if isinstance(target, PathLike):
            target = fspath(target)

        workbook = Workbook(target, {
            'in_memory': True,
            # Only cells with the hyperlink option become links
            'strings_to_urls': False,
            **(options or {})
        })
        try:
            self.render(workbook)
        finally:
            workbook.close()

        logger.info("Saved workbook with %d sheets", len(self.sheets))
