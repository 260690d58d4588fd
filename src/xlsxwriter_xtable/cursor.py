from attr import attrib, attrs

from .utils import normalize_index, normalize_span, to_coords


@attrs(auto_attribs=True)
class Cursor(object):
    """Current write position of a sheet-authoring session.

    Attributes:
        start_row: Row the session started on, one-based
        start_column: Column every row starts from, zero-based
        row: Current row
        column: Current column
        max_column: The furthest column reached in the current sheet, never decreases until reset
    """
    start_row: int = attrib(default=1, converter=lambda value: normalize_index(value, 1))
    start_column: int = attrib(default=0, converter=lambda value: normalize_index(value, 0))
    row: int = attrib(init=False)
    column: int = attrib(init=False)
    max_column: int = attrib(init=False)

    def __attrs_post_init__(self):
        self.row = self.start_row
        self.column = self.start_column
        self.max_column = self.start_column

    def advance(self, colspan=1) -> int:
        """Move `colspan` columns to the right, anything below 1 counts as 1. Returns the new column."""
        self.column += normalize_span(colspan)
        self._bump_max_column()
        return self.column

    def skip(self, num=1) -> int:
        """Skip `num` cells without writing anything."""
        return self.advance(num)

    def break_row(self):
        """Go to `start_column` of the next row."""
        self.row += 1
        self.column = self.start_column

    def reset_max_column(self):
        self.max_column = self.start_column

    @property
    def coords(self) -> str:
        return to_coords(self.row, self.column)

    @property
    def previous_coords(self) -> str:
        """Coordinates of the cell left of the cursor, where the last write of a row usually ended."""
        return to_coords(self.row, max(self.column - 1, 0))

    def _bump_max_column(self):
        if self.column > self.max_column:
            self.max_column = self.column
