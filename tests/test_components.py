from pytest import mark, raises, warns

from xlsxwriter_xtable.borders import BorderSpec, resolve_border_spec
from xlsxwriter_xtable.cursor import Cursor
from xlsxwriter_xtable.formats import FormatDict
from xlsxwriter_xtable.options import OptionCascade, apply_cell_options, apply_range_options, extract_comment
from xlsxwriter_xtable.ranges import Closed, Empty, Open, RangeTracker
from xlsxwriter_xtable.sheet import CellStyle, CommentRun, DocumentProperties, WorksheetModel, parse_coords, parse_range
from xlsxwriter_xtable.utils import (
    column_to_label, is_coords, label_to_column, normalize_color, normalize_span, to_column_and_row, to_coords
)


class TestColumnCodec:
    def test_known_labels(self):
        assert column_to_label(0) == 'A'
        assert column_to_label(25) == 'Z'
        assert column_to_label(26) == 'AA'
        assert column_to_label(51) == 'AZ'
        assert column_to_label(52) == 'BA'
        assert column_to_label(701) == 'ZZ'

    def test_labels_are_one_or_two_letters(self):
        for column in range(0, 702):
            label = column_to_label(column)
            assert 1 <= len(label) <= 2
            assert label.isalpha() and label.isupper()

    def test_past_zz_warns(self):
        with warns(UserWarning):
            assert column_to_label(702) == '[A'

    def test_single_letter_round_trip(self):
        for column in range(26):
            assert label_to_column(column_to_label(column)) == column

    def test_coords(self):
        assert to_coords(3, 1) == 'B3'
        assert to_coords(10, 27) == 'AB10'
        assert to_column_and_row('B3') == (1, 3)
        assert to_column_and_row('$C$12') == (2, 12)

    def test_bad_coords(self):
        with raises(ValueError):
            to_column_and_row('3B')

    def test_labels_past_zz_are_not_coords(self):
        assert is_coords('ZZ5') and is_coords('$B$3')
        assert not is_coords('[A1')
        assert not is_coords(None)

    def test_colors(self):
        assert normalize_color('aabbcc') == 'FFAABBCC'
        assert normalize_color(' #00ff00 ') == 'FF00FF00'
        for bogus in ('red', 'FFF', 'FF000000', 0xFF0000, None):
            assert normalize_color(bogus) is None

    @mark.parametrize('value', [0, -3, 'two', None, 0.5])
    def test_span_normalization(self, value):
        assert normalize_span(value) == 1

    def test_span_is_truncated(self):
        assert normalize_span(2.7) == 2


class TestCursor:
    def test_initial_state(self):
        cursor = Cursor(3, 2)

        assert (cursor.row, cursor.column, cursor.max_column) == (3, 2, 2)
        assert cursor.coords == 'C3'

    def test_bad_start_is_normalized(self):
        cursor = Cursor(-5, 'B')

        assert (cursor.row, cursor.column) == (1, 0)

    def test_max_column_never_decreases(self):
        cursor = Cursor()
        seen = []
        for span in (1, 3, 2, 1):
            cursor.advance(span)
            seen.append(cursor.max_column)
            cursor.break_row()

        assert seen == [1, 3, 3, 3]
        assert seen == sorted(seen)

    def test_invalid_span_counts_as_one(self):
        cursor = Cursor()
        cursor.advance(0)
        cursor.skip(-1)
        cursor.skip('far')

        assert cursor.column == 3

    def test_break_row(self):
        cursor = Cursor(1, 4)
        cursor.advance(5)
        cursor.break_row()

        assert (cursor.row, cursor.column, cursor.max_column) == (2, 4, 9)

    def test_previous_coords(self):
        cursor = Cursor()
        assert cursor.previous_coords == 'A1'

        cursor.advance(3)
        assert cursor.previous_coords == 'C1'


class TestOptionCascade:
    def test_row_wins_over_global_wins_over_call(self):
        cascade = OptionCascade(
            global_options={'bold': False},
            row_options={'bold': True},
            call_options={'bold': False},
        )

        assert cascade.resolve()['bold'] is True

    def test_global_wins_over_call(self):
        cascade = OptionCascade({'italic': True}, {}, {'italic': False, 'wrap': True})

        assert cascade.resolve() == FormatDict({'italic': True, 'wrap': True})

    def test_missing_tiers(self):
        assert OptionCascade(None, None, None).resolve() == {}
        assert OptionCascade(call_options={'bold': True}).resolve() == {'bold': True}


class TestBorderSpec:
    def test_defaults(self):
        assert resolve_border_spec({}) == BorderSpec('thin', 'FF000000', 'outline')

    def test_bogus_names_are_ignored(self):
        assert resolve_border_spec({'border-style': 'bogus'}) == BorderSpec()
        assert resolve_border_spec({'bordering-type': 'diagonal'}) == BorderSpec()

    def test_overrides(self):
        spec = resolve_border_spec({
            'border-style': 'mediumDashDot',
            'border-color': '00FF00',
            'bordering-type': 'allborders',
        })

        assert spec == BorderSpec('mediumDashDot', 'FF00FF00', 'allborders')
        assert spec.style_index == 10

    def test_bogus_color_is_ignored(self):
        assert resolve_border_spec({'border-color': 'red'}).color == 'FF000000'

    def test_none_style(self):
        assert resolve_border_spec({'border-style': 'none'}).style_index == 0

    @staticmethod
    def edge_map(selector):
        spec = BorderSpec(edge_selector=selector)
        bounds = (1, 0, 3, 2)
        return {
            (row, col): spec.edges_at(row, col, bounds)
            for row in range(1, 4)
            for col in range(0, 3)
        }

    def test_outline(self):
        edges = self.edge_map('outline')

        assert edges[(1, 0)] == {'top', 'left'}
        assert edges[(2, 1)] == set()
        assert edges[(3, 2)] == {'bottom', 'right'}

    def test_inside(self):
        edges = self.edge_map('inside')

        assert edges[(1, 0)] == {'bottom', 'right'}
        assert edges[(2, 1)] == {'top', 'bottom', 'left', 'right'}

    def test_vertical_and_horizontal(self):
        assert self.edge_map('vertical')[(2, 1)] == {'left', 'right'}
        assert self.edge_map('horizontal')[(2, 1)] == {'top', 'bottom'}
        assert self.edge_map('vertical')[(2, 0)] == {'right'}

    def test_single_edges(self):
        edges = self.edge_map('top')

        assert edges[(1, 1)] == {'top'}
        assert edges[(2, 1)] == set()
        assert self.edge_map('right')[(3, 2)] == {'right'}

    def test_allborders(self):
        assert all(len(edges) == 4 for edges in self.edge_map('allborders').values())


class TestRangeTracker:
    def test_transitions(self):
        tracker = RangeTracker()
        assert tracker.state == Empty()

        tracker.start('A1')
        assert tracker.state == Open('A1')

        tracker.start('B2')
        assert tracker.state == Open('B2')

        tracker.end('C3')
        assert tracker.state == Closed('B2', 'C3')

    def test_end_without_start_opens(self):
        tracker = RangeTracker()
        tracker.end('D4')

        assert tracker.state == Open('D4')
        assert tracker.is_opened and not tracker.is_closed

    def test_consume(self):
        tracker = RangeTracker()
        assert tracker.consume() is None

        tracker.start('A1')
        assert tracker.consume() is None
        assert tracker.state == Open('A1')

        tracker.end('B2')
        assert tracker.consume() == 'A1:B2'
        assert tracker.state == Empty()


class TestStyles:
    def test_cell_options(self):
        style = CellStyle()
        apply_cell_options(style, {
            'bgcolor': 'AABBCC',
            'bold': 1,
            'underline': True,
            'superscript': True,
            'text-align': 'centerContinuous',
            'vertical-align': 'center',
            'font-size': 12,
        })

        assert style.to_format() == {
            'pattern': 1,
            'bg_color': '#AABBCC',
            'bold': True,
            'underline': 1,
            'font_script': 1,
            'font_size': 12,
            'align': 'center_across',
            'valign': 'vcenter',
        }

    def test_absent_keys_leave_style_untouched(self):
        style = CellStyle(bold=True, wrap=True)
        apply_cell_options(style, {'italic': True, 'text-align': 'sideways', 'bold': None})

        assert style.bold is True
        assert style.wrap is True
        assert style.italic is True
        assert style.horizontal is None

    def test_default_font_size(self):
        style = CellStyle()
        apply_cell_options(style, {}, default_font_size=9)
        assert style.font_size == 9

        apply_cell_options(style, {'font-size': 14}, default_font_size=9)
        assert style.font_size == 14

    def test_cell_borders(self):
        style = CellStyle()
        apply_cell_options(style, {'borders': {
            'top': {'border-style': 'thick', 'border-color': 'FF0000'},
            'left': {'border-style': 'bogus'},
            'bottom': {},
        }})

        assert style.borders == {'top': ('thick', 'FFFF0000'), 'left': ('thin', 'FF000000')}
        assert style.to_format() == FormatDict({
            'top': 5, 'top_color': '#FF0000',
            'left': 1, 'left_color': '#000000',
        })

    def test_subscript_clears_superscript(self):
        style = CellStyle()
        style.set_font(superscript=True)
        style.set_font(subscript=True)

        assert style.to_format() == {'font_script': 2}

    def test_range_options(self):
        sheet = WorksheetModel('Test')
        style = sheet.get_style('B2:A1')
        assert style.bounds == (1, 0, 2, 1)

        apply_range_options(style, {'border-style': 'double', 'font': {'italic': True, 'size': 'big'}})

        assert sheet.get_style('A1').borders == {'top': ('double', 'FF000000'), 'left': ('double', 'FF000000')}
        assert sheet.get_style('B2').borders == {'bottom': ('double', 'FF000000'), 'right': ('double', 'FF000000')}
        assert all(cell.italic for cell in sheet.styles.values())
        assert all(cell.font_size is None for cell in sheet.styles.values())

    def test_range_options_without_border_keys(self):
        sheet = WorksheetModel('Test')
        apply_range_options(sheet.get_style('A1:B1'), {'font': {'bold': True}})

        assert all(not cell.borders for cell in sheet.styles.values())

    def test_cell_options_on_a_range(self):
        sheet = WorksheetModel('Test')
        apply_cell_options(sheet.get_style('A1:A2'), {'bgcolor': 'FFFF00', 'text-align': 'right'})

        assert sheet.get_style('A2').to_format() == {'pattern': 1, 'bg_color': '#FFFF00', 'align': 'right'}

    def test_parse_range(self):
        assert parse_range('C3') == (3, 2, 3, 2)
        assert parse_range('AA10:B2') == (2, 1, 10, 26)
        assert parse_range('ZY2:[A2') is None
        assert parse_coords('[A1') is None

    def test_bogus_fill_is_ignored(self):
        style = CellStyle()
        apply_cell_options(style, {'bgcolor': 'red', 'borders': {'top': {'border-color': 'blue'}}})

        assert style.fill_color is None
        assert style.borders == {'top': ('thin', 'FF000000')}

    def test_unaddressable_cells_are_left_alone(self):
        sheet = WorksheetModel('Test')
        apply_cell_options(sheet.get_style('[A1'), {'bold': True})
        apply_range_options(sheet.get_style('ZZ1:[A2'), {'border-style': 'thick'})
        sheet.merge_cells('ZY1:[A1')
        sheet.set_comment('[A1', [CommentRun('Lost')])
        sheet.set_hyperlink('[A1', 'https://example.com')

        assert sheet.styles == {}
        assert sheet.merges == []
        assert sheet.comments == {}
        assert sheet.hyperlinks == {}


class TestDocumentProperties:
    def test_unknown_keys_are_ignored(self):
        properties = DocumentProperties.from_options(creator='Someone', modified_by='Someone else', pages=3)

        assert properties.creator == 'Someone'
        assert 'modified_by' not in properties.to_xlsxwriter()


class TestComments:
    def test_lines_stop_at_blank_text(self):
        runs, width, height = extract_comment({'comment': {
            'lines': [
                {'text': 'First', 'options': {'bold': True}},
                {'text': 'Second'},
                {'text': '   '},
                {'text': 'Never'},
            ],
            'options': {'width': 200, 'height': -1},
        }})

        assert runs == [CommentRun('First', True), CommentRun('Second', False)]
        assert (width, height) == (200, None)

    def test_no_comment(self):
        assert extract_comment({'comment': 'text'}) == ([], None, None)
        assert extract_comment({}) == ([], None, None)
