import collections


DESIGN_PREFIX = '_design'


class ViewResult(object):
    """One page of a view query; contains rows and total_rows.
    Instances of this class are not supposed to be created by client software.
    """

    def __init__(self, rows, total_rows=None):
        self.rows = rows
        self.total_rows = total_rows

    @classmethod
    def from_json(cls, data):
        return cls(
            [
                Row(r.get("id"), r.get("key"), r.get("value"), r.get("error"), r.get("doc"))
                for r in data.get("rows", [])
            ],
            data.get("total_rows"),
        )

    def __len__(self):
        return len(self.rows)

    def __getitem__(self, i):
        return self.rows[i]

    def __iter__(self):
        return iter(self.rows)

class FindResult(object):
    """One page of a Mango ``_find`` query."""

    def __init__(self, docs, bookmark=None, warning=None, execution_stats=None):
        self.docs = docs
        self.bookmark = bookmark
        self.warning = warning
        self.execution_stats = execution_stats

    @classmethod
    def from_json(cls, data):
        return cls(
            data.get("docs", []),
            data.get("bookmark"),
            data.get("warning"),
            data.get("execution_stats"),
        )

    def __len__(self):
        return len(self.docs)

    def __iter__(self):
        return iter(self.docs)


class Row(collections.namedtuple("Row", ["id", "key", "value", "error", "doc"])):
    __slots__ = ()

    @property
    def is_design(self):
        """Whether the row belongs to a design document."""
        return self.id is not None and self.id.startswith(DESIGN_PREFIX)
