"""Option sets, their three-tier cascade and their application to style handles.

Option sets use the following keys, values set to None count as absent:

* ``bgcolor`` - background color, ``RRGGBB``, anything else is ignored
* ``bold``, ``italic``, ``underline``, ``strikethrough``, ``subscript``, ``superscript``, ``wrap`` - booleans
* ``font-size`` - text size
* ``text-align`` - ``general``, ``left``, ``right``, ``center``, ``centerContinuous`` or ``justify``
* ``vertical-align`` - ``bottom``, ``center``, ``justify`` or ``top``
* ``borders`` - a mapping of ``top``, ``bottom``, ``left`` and ``right`` to ``border-style`` and ``border-color``
* ``comment`` - ``lines``, a list of ``text`` with optional ``options`` (``bold``), and optional ``options``
  (``width`` and ``height`` in points)
* ``hyperlink`` - turn the cell value into a link if it's an URL or an e-mail address
* ``height`` - row height, only meaningful for row options
"""

from typing import Any, List, Mapping, Optional, Tuple, Union

from attr import attrib, attrs

from .borders import EDGES, resolve_border_spec
from .formats import FormatDict
from .sheet import CellStyle, CommentRun, RangeStyle
from .utils import normalize_color, normalize_positive

StyleHandle = Union[CellStyle, RangeStyle]

FONT_FLAGS = ('bold', 'italic', 'underline', 'strikethrough', 'subscript', 'superscript')
RANGE_BORDER_KEYS = ('border-style', 'border-color', 'bordering-type')


def _as_format_dict(options: Optional[Mapping[str, Any]]) -> FormatDict:
    return FormatDict(options or {})


@attrs(auto_attribs=True, frozen=True)
class OptionCascade(object):
    """The three option tiers a single write is formatted with.

    Attributes:
        global_options: Options for every cell of the session
        row_options: Options for every cell of the current row
        call_options: Options of this one write
    """
    global_options: FormatDict = attrib(factory=FormatDict, converter=_as_format_dict)
    row_options: FormatDict = attrib(factory=FormatDict, converter=_as_format_dict)
    call_options: FormatDict = attrib(factory=FormatDict, converter=_as_format_dict)

    def resolve(self) -> FormatDict:
        """Merge the tiers into effective options.

        Call options are merged first, then global options, then row options, so row options win over global ones
        and both win over call options.

        Examples:
            >>> OptionCascade({'bold': False}, {'bold': True}, {'bold': False}).resolve()
            {'bold': True}
        """
        return self.call_options | self.global_options | self.row_options


def apply_cell_options(style: StyleHandle, options: Mapping[str, Any], default_font_size=None):
    """Apply style related `options` to `style`, keys that are absent leave the style untouched.

    `default_font_size` is used when `options` have no ``font-size``.
    """
    fill = normalize_color(options.get('bgcolor'))
    if fill is not None:
        style.set_fill(fill)

    style.set_font(**{
        flag: bool(options[flag])
        for flag in FONT_FLAGS
        if options.get(flag) is not None
    })

    if options.get('wrap') is not None:
        style.set_alignment(wrap=bool(options['wrap']))

    font_size = normalize_positive(options.get('font-size')) or normalize_positive(default_font_size)
    if font_size:
        style.set_font(size=int(font_size))

    style.set_alignment(horizontal=options.get('text-align'), vertical=options.get('vertical-align'))

    borders = options.get('borders')
    if borders:
        for edge in EDGES:
            if borders.get(edge):
                spec = resolve_border_spec(borders[edge])
                style.set_border(edge, spec.style, spec.color)


def apply_range_options(style: RangeStyle, options: Mapping[str, Any]):
    """Apply border and font `options` to a whole range.

    Border options are ``border-style``, ``border-color`` and ``bordering-type`` (the edge selector), ``font`` is a
    mapping of ``bold``, ``italic``, ``size``, ``underline``, ``strikethrough``, ``subscript`` and ``superscript``.
    """
    if any(options.get(key) for key in RANGE_BORDER_KEYS):
        style.apply_border(resolve_border_spec(options))

    font = options.get('font')
    if font:
        style.set_font(**{
            flag: bool(font[flag])
            for flag in FONT_FLAGS
            if font.get(flag) is not None
        })
        size = normalize_positive(font.get('size'))
        if size:
            style.set_font(size=int(size))


def extract_comment(options: Mapping[str, Any]) -> Tuple[List[CommentRun], Optional[float], Optional[float]]:
    """Turn the ``comment`` option into text runs and the comment box width and height.

    Lines are taken until the first one without text.
    """
    comment = options.get('comment')
    if not isinstance(comment, Mapping):
        return [], None, None

    runs = []
    for line in comment.get('lines') or []:
        text = line.get('text')
        if text is None or str(text).strip() == '':
            break
        line_options = line.get('options')
        bold = isinstance(line_options, Mapping) and line_options.get('bold') is True
        runs.append(CommentRun(str(text), bold))

    box = comment.get('options')
    if not isinstance(box, Mapping):
        return runs, None, None

    return runs, normalize_positive(box.get('width')), normalize_positive(box.get('height'))
