# ui/csv_parser.py

import re
from typing import List, Optional
from models.schema import CsvRow

CSV_FIELDS = ["pincode", "disease_name", "cases", "date", "advice"]

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

def parse_leading_int(value: str) -> Optional[int]:
    """ "12" -> 12, "12abc" -> 12, "abc" -> None """
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else None

def parse_csv_text(text: str) -> List[CsvRow]:
    """
    Parse an outbreak CSV upload.

    The first line is a header and is always dropped, whatever it says.
    Fields are split on plain commas, so a comma inside a value (even quoted)
    shifts the columns. A cases value that is not a number is still sent,
    as None; the server decides what to store.
    """
    rows = []
    for line in text.split("\n")[1:]:
        if not line.strip():
            continue
        fields = [field.strip() for field in line.split(",")]
        fields += [""] * (len(CSV_FIELDS) - len(fields))
        pincode, disease_name, cases, date, advice = fields[:len(CSV_FIELDS)]
        rows.append(CsvRow(
            pincode=pincode,
            disease_name=disease_name,
            cases=parse_leading_int(cases),
            date=date,
            advice=advice,
        ))
    return rows
