from typing import NamedTuple

ALL_SEVERITY = 'All Severity'
ALL_TYPES = 'All Types'

SEVERITY_LEVELS = ['Critical', 'High', 'Medium', 'Low']
ATTACK_TYPES = ['SYN Flood', 'HTTP Flood', 'UDP Flood', 'DNS Amplification']


class FilterCriteria(NamedTuple):
    """Immutable filter selection for the attack table"""
    severity: str = ALL_SEVERITY
    attack_type: str = ALL_TYPES
    query: str = ''

    @classmethod
    def from_args(cls, args):
        """Build criteria from request query parameters"""
        return cls(
            severity=args.get('severity', '').strip() or ALL_SEVERITY,
            attack_type=args.get('type', '').strip() or ALL_TYPES,
            query=args.get('q', '').strip()
        )

    def is_empty(self):
        return self == FilterCriteria()


def _record_type(record):
    if 'attackType' in record:
        return record['attackType']
    return record.get('type', '')


def matches(record, criteria):
    """Check if a record satisfies every active criterion"""
    if criteria.severity and criteria.severity != ALL_SEVERITY:
        if str(record.get('severity', '')) != criteria.severity:
            return False

    if criteria.attack_type and criteria.attack_type != ALL_TYPES:
        if str(_record_type(record)) != criteria.attack_type:
            return False

    query = criteria.query.lower()
    if query:
        if not any(query in str(value).lower() for value in record.values()):
            return False

    return True


def filter_records(dataset, criteria):
    """Return a new dataset holding the records that match, in input order"""
    return dataset.derive(record for record in dataset if matches(record, criteria))


def distinct_values(dataset, field):
    """Distinct non-empty values of a column, first-seen order"""
    seen = []
    for record in dataset:
        value = record.get(field, '')
        if value != '' and value not in seen:
            seen.append(value)
    return seen
