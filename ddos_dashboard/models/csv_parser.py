import re

from .dataset import Dataset

NUMERIC_PATTERN = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?', re.ASCII)
INTEGER_PATTERN = re.compile(r'[+-]?\d+', re.ASCII)
BYTE_ORDER_MARK = '\ufeff'


def split_csv_line(line):
    """Split one line on commas that are not inside double quotes.

    Quote characters only toggle state and are never kept. Unbalanced
    quotes are accepted: the line simply ends in whatever state the scan
    reached.
    """
    values = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            values.append(''.join(current))
            current = []
        else:
            current.append(char)

    values.append(''.join(current))
    return values


def coerce_value(value):
    """Return an int or float when the whole string is a numeric literal"""
    if not value or not NUMERIC_PATTERN.fullmatch(value):
        return value
    if INTEGER_PATTERN.fullmatch(value):
        return int(value)
    return float(value)


def clean_field(raw):
    value = raw.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return coerce_value(value)


def parse_headers(header_line):
    return [h.strip() for h in header_line.split(',')]


def parse_csv(csv_text):
    """
    Parse CSV text into a Dataset of records keyed by header name.

    Rows shorter than the header get '' for the missing trailing columns,
    extra fields are dropped. A leading byte-order mark is ignored.
    Malformed content never raises; empty input yields an empty dataset
    with no headers.
    """
    text = csv_text.strip().lstrip(BYTE_ORDER_MARK).strip()
    if not text:
        return Dataset.empty()

    lines = text.split('\n')
    headers = parse_headers(lines[0])
    records = []

    for line in lines[1:]:
        values = split_csv_line(line)
        record = {}
        for index, header in enumerate(headers):
            raw = values[index] if index < len(values) else ''
            record[header] = clean_field(raw)
        records.append(record)

    return Dataset(records, headers)
