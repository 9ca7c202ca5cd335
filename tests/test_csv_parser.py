from ui.csv_parser import parse_csv_text, parse_leading_int


def test_single_row_upload():
    rows = parse_csv_text("pincode,disease,cases,date,advice\n110001,Dengue,12,2024-01-01,Stay hydrated\n")

    assert [r.model_dump() for r in rows] == [{
        "pincode": "110001",
        "disease_name": "Dengue",
        "cases": 12,
        "date": "2024-01-01",
        "advice": "Stay hydrated",
    }]


def test_header_is_dropped_whatever_it_says():
    rows = parse_csv_text("110001,Dengue,12,2024-01-01,first line\n560001,Malaria,3,2024-02-01,x")
    assert [r.pincode for r in rows] == ["560001"]


def test_blank_lines_and_whitespace():
    text = "h\n\n  400001 , Cholera , 7 , 2024-03-05 , Boil water \r\n   \n"
    rows = parse_csv_text(text)
    assert len(rows) == 1
    assert rows[0].pincode == "400001"
    assert rows[0].advice == "Boil water"
    assert rows[0].cases == 7


def test_non_numeric_cases_is_still_forwarded():
    rows = parse_csv_text("h\n110001,Dengue,abc,2024-01-01,advice\n")
    assert len(rows) == 1
    assert rows[0].cases is None


def test_missing_fields_become_empty():
    rows = parse_csv_text("h\n110001,Dengue\n")
    assert rows[0].date == ""
    assert rows[0].advice == ""
    assert rows[0].cases is None


def test_embedded_comma_shifts_columns():
    rows = parse_csv_text('h\n110001,Dengue,4,2024-01-01,"Rest, drink fluids"\n')
    assert rows[0].advice == '"Rest'


def test_parse_leading_int():
    assert parse_leading_int("12") == 12
    assert parse_leading_int(" 12abc") == 12
    assert parse_leading_int("-3") == -3
    assert parse_leading_int("abc") is None
    assert parse_leading_int("") is None
