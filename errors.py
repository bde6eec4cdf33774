class InjuryDataError(ValueError):
    """Base error for problems with the injury input data."""


class MissingColumnError(InjuryDataError):
    def __init__(self, column, columns):
        self.column = column
        super().__init__(
            f"Input has no '{column}' column (found: {', '.join(map(str, columns))})"
        )


class MalformedRowError(InjuryDataError):
    """A row whose date cannot be parsed under any known format."""

    def __init__(self, row, value, bad_rows=1):
        self.row = row
        self.value = value
        self.bad_rows = bad_rows
        # Data rows start on line 2, after the header
        self.line = row + 2
        msg = f"Unparseable date {value!r} at row {row} (line {self.line})"
        if bad_rows > 1:
            msg += f"; {bad_rows - 1} more row(s) also malformed"
        super().__init__(msg)
