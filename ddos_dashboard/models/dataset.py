class Dataset(list):
    """
    Ordered sequence of parsed CSV records sharing one header set.

    Behaves as a plain list of dicts so it can be compared, sliced and
    handed to jsonify directly; the header tuple it was parsed with travels
    alongside. Datasets are treated as immutable once built: filtering and
    uploads always produce a new instance.
    """

    def __init__(self, records=(), headers=()):
        super().__init__(records)
        self.headers = tuple(headers)

    @classmethod
    def empty(cls):
        return cls()

    def derive(self, records):
        """New dataset with the same headers and the given records"""
        return Dataset(records, self.headers)

    def __repr__(self):
        return f"Dataset(headers={self.headers!r}, records={len(self)})"
