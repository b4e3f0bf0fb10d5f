"""Unit tests for the JSONPath, XPath and spreadsheet cell resolvers."""

from datetime import datetime

import pytest

from resource_import.app.core.errors import (
    CellNotFoundError,
    InvalidAddressError,
    InvalidFlagError,
    JsonQueryError,
    NoMatchError,
    SheetNotFoundError,
    SourceParseError,
    UnsupportedCellTypeError,
    XPathQueryError,
)
from resource_import.app.services.resolvers.cells import (
    MISSING_CELL,
    CellAddress,
    CellResolver,
    load_sheet,
    parse_cell_address,
)
from resource_import.app.services.resolvers.json_path import JsonPathResolver, parse_json_source
from resource_import.app.services.resolvers.xpath import XPathResolver, parse_xml_source


class TestJsonPathResolver:

    @pytest.fixture
    def resolver(self):
        tree = parse_json_source(
            '{"a": "bar", "b": 2, "c": [1, 2, 3], "d": [{"n": "x", "v": 1}, {"n": "y", "v": 5}], "e": null,'
            ' "first-name": "Jordi"}'
        )
        return JsonPathResolver(tree)

    def test_single_matches_keep_their_shape(self, resolver):
        assert resolver.resolve("$.a") == "bar"
        assert resolver.resolve("$.b") == 2
        assert resolver.resolve("$.c") == [1, 2, 3]

    def test_multiple_matches_collapse_into_a_list(self, resolver):
        assert resolver.resolve("$.d[*].n") == ["x", "y"]

    def test_indexes_and_slices(self, resolver):
        assert resolver.resolve("$.c[0]") == 1
        assert resolver.resolve("$.d[1].n") == "y"
        assert resolver.resolve("$.c[0:2]") == [1, 2]

    def test_hyphenated_keys(self, resolver):
        assert resolver.resolve("$.first-name") == "Jordi"

    def test_recursive_descent(self, resolver):
        assert resolver.resolve("$..n") == ["x", "y"]

    def test_filters(self, resolver):
        assert resolver.resolve('$.d[?(@.n == "y")].n') == "y"
        assert resolver.resolve("$.d[?(@.v > 0)].n") == ["x", "y"]

    def test_null_normalizes_to_empty_string(self, resolver):
        assert resolver.resolve("$.e") == ""

    def test_no_match_is_an_error(self, resolver):
        with pytest.raises(NoMatchError) as exc:
            resolver.resolve("$.missing")
        assert exc.value.path == "$.missing"

    @pytest.mark.parametrize("expr", ["$.[[", "$.d[?(@.n ==]"])
    def test_syntax_error(self, resolver, expr):
        with pytest.raises(JsonQueryError):
            resolver.resolve(expr)

    def test_unparseable_source(self):
        with pytest.raises(SourceParseError):
            parse_json_source("{not json")


class TestXPathResolver:

    @pytest.fixture
    def resolver(self):
        document = parse_xml_source(
            '<?xml version="1.0" encoding="ISO-8859-1"?>'
            '<catalog><book isbn="1"><title>Graphs</title></book><book isbn="2"><title>Données</title></book></catalog>'
        )
        return XPathResolver(document)

    def test_node_sets_are_lists(self, resolver):
        assert resolver.resolve("/catalog/book/title/text()") == ["Graphs", "Données"]
        assert resolver.resolve("/catalog/book[1]/@isbn") == ["1"]
        assert resolver.resolve("/catalog/book[2]") == [{"@isbn": "2", "title": "Données"}]

    def test_empty_selection_is_an_empty_list(self, resolver):
        assert resolver.resolve("/catalog/author") == []

    def test_scalar_results(self, resolver):
        assert resolver.resolve("count(/catalog/book)") == 2.0
        assert resolver.resolve("string(/catalog/book[1]/title)") == "Graphs"
        assert resolver.resolve("boolean(/catalog/book)") is True

    def test_invalid_expression(self, resolver):
        with pytest.raises(XPathQueryError):
            resolver.resolve("/catalog/book[")

    def test_unparseable_source(self):
        with pytest.raises(SourceParseError):
            parse_xml_source("<catalog><book></catalog>")


class TestParseCellAddress:

    def test_two_parts_are_converted_to_zero_based(self):
        assert parse_cell_address("2,3") == CellAddress(row=1, column=2, flag=None)

    def test_three_parts_carry_the_flag(self):
        assert parse_cell_address("2, 3, 1") == CellAddress(row=1, column=2, flag=1)

    @pytest.mark.parametrize("expr", ["2", "1,2,3,4", ""])
    def test_wrong_arity(self, expr):
        with pytest.raises(InvalidAddressError):
            parse_cell_address(expr)

    @pytest.mark.parametrize(
        "expr, component",
        [("a,3", "row"), ("2,b", "column"), ("2,3,x", "flag"), ("1.5,2", "row")],
    )
    def test_non_integer_components(self, expr, component):
        with pytest.raises(InvalidAddressError) as exc:
            parse_cell_address(expr)
        assert exc.value.component == component


class TestCellResolver:

    @pytest.fixture
    def resolver(self):
        rows = (
            ("name", "active", "score", "notes"),
            ("Y", "N", 4.5, ""),
            ("yes", "no", True, "free text"),
            ("x", "X", None, datetime(2014, 11, 20)),
            ("n", "maybe"),
        )
        return CellResolver(rows, sheet_name="Metrics")

    def test_plain_values(self, resolver):
        assert resolver.resolve("1,1") == "name"
        assert resolver.resolve("2,3") == 4.5
        assert resolver.resolve("3,3") is True
        assert resolver.resolve("3,4,0") == "free text"

    @pytest.mark.parametrize("expr", ["2,1", "3,1", "4,1", "4,2"])
    def test_truthy_strings(self, resolver, expr):
        assert resolver.resolve(expr) is True

    @pytest.mark.parametrize("expr", ["2,2", "3,2", "5,1"])
    def test_falsy_strings(self, resolver, expr):
        assert resolver.resolve(expr) is False

    def test_other_strings_pass_through(self, resolver):
        assert resolver.resolve("5,2") == "maybe"

    def test_truthy_matching_is_case_sensitive(self):
        resolver = CellResolver((("YES", "No"),))
        assert resolver.resolve("1,1") == "YES"
        assert resolver.resolve("1,2") == "No"

    def test_presence_flag(self, resolver):
        assert resolver.resolve("2,4,1") is False
        assert resolver.resolve("3,4,1") is True
        assert resolver.resolve("2,3,1") is True
        assert resolver.resolve("2,2,1") is True

    def test_invalid_flag(self, resolver):
        with pytest.raises(InvalidFlagError) as exc:
            resolver.resolve("2,3,4")
        assert exc.value.path == "2,3,4"

    @pytest.mark.parametrize("expr", ["9,1", "1,9", "5,3", "0,1", "1,0"])
    def test_missing_cells(self, resolver, expr):
        with pytest.raises(CellNotFoundError):
            resolver.resolve(expr)

    def test_dates_come_back_as_serial_numbers(self, resolver):
        assert resolver.resolve("4,4") == 41963

    def test_undefined_rows_and_cells(self):
        resolver = CellResolver((("a", MISSING_CELL, "c"), None, ("x",)))
        for expr in ("1,2", "2,1"):
            with pytest.raises(CellNotFoundError):
                resolver.resolve(expr)
        assert resolver.resolve("3,1") is True

    def test_blank_cells_are_unsupported(self, resolver):
        with pytest.raises(UnsupportedCellTypeError):
            resolver.resolve("4,3")


class TestLoadSheet:

    def test_rows_are_read_from_the_named_sheet(self, workbook_file):
        path = workbook_file([["name", "score"], ["jordi", 7]], sheet="Metrics")
        rows = load_sheet(path, "Metrics")
        assert rows[1] == ("jordi", 7)

    def test_unknown_sheet(self, workbook_file):
        path = workbook_file([["a"]], sheet="Metrics")
        with pytest.raises(SheetNotFoundError):
            load_sheet(path, "Other")

    def test_gaps_inside_a_row_are_not_found(self, cells_workbook_file):
        path = cells_workbook_file({"A1": "a", "C1": "c"})
        resolver = CellResolver(load_sheet(path, "Metrics"), sheet_name="Metrics")
        assert resolver.resolve("1,1") == "a"
        assert resolver.resolve("1,3") == "c"
        with pytest.raises(CellNotFoundError):
            resolver.resolve("1,2")

    def test_rows_between_populated_rows_are_not_found(self, cells_workbook_file):
        path = cells_workbook_file({"A1": "a", "A3": "c"})
        resolver = CellResolver(load_sheet(path, "Metrics"), sheet_name="Metrics")
        assert resolver.resolve("3,1") == "c"
        with pytest.raises(CellNotFoundError):
            resolver.resolve("2,1")

    def test_empty_string_cells(self, cells_workbook_file):
        path = cells_workbook_file({"A1": "a", "B1": ""})
        resolver = CellResolver(load_sheet(path, "Metrics"), sheet_name="Metrics")
        assert resolver.resolve("1,2") == ""
        assert resolver.resolve("1,2,1") is False

    def test_date_cells_are_numeric(self, cells_workbook_file):
        path = cells_workbook_file({"A1": datetime(2014, 11, 20), "B1": 7})
        resolver = CellResolver(load_sheet(path, "Metrics"), sheet_name="Metrics")
        assert resolver.resolve("1,1") == 41963
        assert resolver.resolve("1,1,1") is True
