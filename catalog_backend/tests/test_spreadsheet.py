"""
Spreadsheet parsing tests (xlsx via openpyxl, csv).
"""
import io

import openpyxl
import pytest

from catalog_backend.services.spreadsheet import (
    SpreadsheetError,
    parse_spreadsheet,
    read_xlsx_rows,
    write_xlsx,
)


class TestReadXlsx:

    def test_first_sheet_rows(self, xlsx_bytes):
        content = xlsx_bytes(
            ["Fabricante/Marca", "Nombre", "Atributo 1"],
            [["Acme", "Widget", None], ["Beta", "Gadget", "Sin gluten"]],
        )
        rows = parse_spreadsheet(content, "productos.xlsx")
        assert rows == [
            {"Fabricante/Marca": "Acme", "Nombre": "Widget", "Atributo 1": ""},
            {"Fabricante/Marca": "Beta", "Nombre": "Gadget", "Atributo 1": "Sin gluten"},
        ]

    def test_blank_rows_skipped_and_numbers_kept(self, xlsx_bytes):
        content = xlsx_bytes(["Marca", "Nombre"], [[None, None], ["Acme", 42]])
        assert parse_spreadsheet(content, "p.xlsx") == [{"Marca": "Acme", "Nombre": 42}]

    def test_duplicate_and_empty_headers(self, xlsx_bytes):
        content = xlsx_bytes(["Nombre", None, "Nombre"], [["a", "ignored", "b"]])
        assert parse_spreadsheet(content, "p.xlsx") == [{"Nombre": "a", "Nombre_1": "b"}]

    def test_named_sheet(self):
        wb = openpyxl.Workbook()
        wb.active.append(["Nombre"])
        wb.active.append(["from first"])
        ws = wb.create_sheet("Final_02-26")
        ws.append(["Nombre"])
        ws.append(["from named"])
        buffer = io.BytesIO()
        wb.save(buffer)

        assert read_xlsx_rows(buffer.getvalue(), "Final_02-26") == [{"Nombre": "from named"}]
        assert read_xlsx_rows(buffer.getvalue(), "Missing") == [{"Nombre": "from first"}]

    def test_header_only_sheet(self, xlsx_bytes):
        assert parse_spreadsheet(xlsx_bytes(["Nombre"], []), "p.xlsx") == []

    def test_not_a_workbook(self):
        with pytest.raises(SpreadsheetError):
            parse_spreadsheet(b"definitely not a zip file", "p.xlsx")

    def test_empty_file(self):
        with pytest.raises(SpreadsheetError):
            parse_spreadsheet(b"", "p.xlsx")


class TestReadCsv:

    def test_comma_separated(self):
        content = "Fabricante/Marca,Nombre\nAcme,Widget\n,\n".encode("utf-8")
        assert parse_spreadsheet(content, "p.csv") == [{"Fabricante/Marca": "Acme", "Nombre": "Widget"}]

    def test_semicolon_and_bom(self):
        content = "\ufeffMarca;Nombre;Tienda\nAcme;Widget;\n".encode("utf-8")
        assert parse_spreadsheet(content, "p.csv") == [{"Marca": "Acme", "Nombre": "Widget", "Tienda": ""}]

    def test_latin1(self):
        content = "Categoría 1,Nombre\nLácteos,Queso\n".encode("latin-1")
        assert parse_spreadsheet(content, "p.csv") == [{"Categoría 1": "Lácteos", "Nombre": "Queso"}]


class TestWriteXlsx:

    def test_write_then_read(self):
        content = write_xlsx(
            [{"id": 1, "nombre": "Widget", "tienda": None}],
            ["id", "nombre", "tienda"],
        )
        wb = openpyxl.load_workbook(io.BytesIO(content))
        ws = wb.active
        assert ws.title == "Productos"
        assert [c.value for c in ws[1]] == ["id", "nombre", "tienda"]
        assert [c.value for c in ws[2]] == [1, "Widget", None]
