import re

DATASET_NAME_PATTERN = re.compile(r'^[A-Za-z0-9_\-]+\.csv$')


def validate_dataset_name(name):
    """Plain CSV file name, no directories"""
    return isinstance(name, str) and bool(DATASET_NAME_PATTERN.match(name))


def sanitize_input(text, max_length=200):
    """Sanitize user input"""
    if not isinstance(text, str):
        return ""
    return text.strip()[:max_length]


def decode_upload(raw_bytes):
    """Decode uploaded CSV bytes as text.

    Raises UnicodeDecodeError when the content is not text at all.
    """
    text = raw_bytes.decode('utf-8-sig')
    if '\x00' in text:
        raise UnicodeDecodeError('utf-8', raw_bytes, 0, 1, 'binary content')
    return text
