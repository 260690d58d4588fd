"""Border style names, edge selectors and their resolution into a fully populated :class:`BorderSpec`."""

from typing import Any, Mapping, Set, Tuple

from attr import attrs, evolve

from .utils import normalize_color

# Border style name -> XlsxWriter border index
BORDER_STYLES = {
    'none': 0,
    'thin': 1,
    'medium': 2,
    'dashed': 3,
    'dotted': 4,
    'thick': 5,
    'double': 6,
    'hair': 7,
    'mediumDashed': 8,
    'dashDot': 9,
    'mediumDashDot': 10,
    'dashDotDot': 11,
    'mediumDashDotDot': 12,
    'slantDashDot': 13,
}

EDGE_SELECTORS = frozenset({
    'allborders',
    'outline',
    'inside',
    'vertical',
    'horizontal',
    'top',
    'bottom',
    'left',
    'right',
})

EDGES = ('top', 'bottom', 'left', 'right')

DEFAULT_BORDER_STYLE = 'thin'
DEFAULT_BORDER_COLOR = 'FF000000'
DEFAULT_EDGE_SELECTOR = 'outline'

# (first row, first column, last row, last column)
Bounds = Tuple[int, int, int, int]


@attrs(auto_attribs=True, frozen=True)
class BorderSpec(object):
    """A border description with every field filled in.

    Attributes:
        style: One of :data:`BORDER_STYLES` names
        color: ARGB color, always with full opacity
        edge_selector: One of :data:`EDGE_SELECTORS`, which sides of a region get the border
    """
    style: str = DEFAULT_BORDER_STYLE
    color: str = DEFAULT_BORDER_COLOR
    edge_selector: str = DEFAULT_EDGE_SELECTOR

    @property
    def style_index(self) -> int:
        return BORDER_STYLES[self.style]

    def edges_at(self, row: int, column: int, bounds: Bounds) -> Set[str]:
        """Which edges of the cell at `row` and `column` get this border when it is applied to `bounds`.

        Examples:
            >>> sorted(BorderSpec().edges_at(1, 0, (1, 0, 1, 0)))
            ['bottom', 'left', 'right', 'top']
            >>> sorted(BorderSpec(edge_selector='inside').edges_at(2, 1, (1, 0, 2, 1)))
            ['left', 'top']
        """
        first_row, first_column, last_row, last_column = bounds
        selector = self.edge_selector

        if selector == 'allborders':
            return set(EDGES)

        outer = selector == 'outline'
        inner_horizontal = selector in ('inside', 'horizontal')
        inner_vertical = selector in ('inside', 'vertical')

        edges = set()
        if row == first_row and (outer or selector == 'top') or row > first_row and inner_horizontal:
            edges.add('top')
        if row == last_row and (outer or selector == 'bottom') or row < last_row and inner_horizontal:
            edges.add('bottom')
        if column == first_column and (outer or selector == 'left') or column > first_column and inner_vertical:
            edges.add('left')
        if column == last_column and (outer or selector == 'right') or column < last_column and inner_vertical:
            edges.add('right')

        return edges


def resolve_border_spec(options: Mapping[str, Any]) -> BorderSpec:
    """Build a :class:`BorderSpec` out of raw `border-style`, `border-color` and `bordering-type` options.

    Unrecognized style or selector names and colors that are not ``RRGGBB`` are ignored, the defaults (thin,
    black, outline) are kept.

    Examples:
        >>> resolve_border_spec({'border-style': 'bogus'})
        BorderSpec(style='thin', color='FF000000', edge_selector='outline')
        >>> resolve_border_spec({'border-style': 'double', 'border-color': 'FF0000', 'bordering-type': 'inside'})
        BorderSpec(style='double', color='FFFF0000', edge_selector='inside')
    """
    spec = BorderSpec()

    if options.get('border-style') in BORDER_STYLES:
        spec = evolve(spec, style=options['border-style'])

    if options.get('bordering-type') in EDGE_SELECTORS:
        spec = evolve(spec, edge_selector=options['bordering-type'])

    color = normalize_color(options.get('border-color'))
    if color is not None:
        spec = evolve(spec, color=color)

    return spec
