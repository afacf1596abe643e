"""Exception taxonomy for instrument loading and pool access.

WHY: Callers (the owning document, the CLI) need to tell a corrupt file
apart from a programming error. A small typed hierarchy lets them catch
exactly the failures that abort a load.

HOW: InstrumentFormatError is the common base and subclasses ValueError so
generic "bad input" handlers still work. StaleHandleError is a LookupError
because it is about addressing the pool, not about file contents.

RULES:
- FatalFormatError and BoundsError abort the whole load; never retried
- A dropped exchange slot (pool exhausted) is NOT an exception
- A field missing from an older version is NOT an exception
"""


class InstrumentFormatError(ValueError):
    """Base class for every failure decoding instrument data."""


class FatalFormatError(InstrumentFormatError):
    """Raised when a declared slot count is larger than the format allows.

    WHY: A count above five means the record is not an S5B slot record at
    all, so nothing after it can be trusted.

    RULES:
    - Raised before any slot is mutated
    """


class TruncatedDataError(FatalFormatError):
    """Raised when the stream ends before a field could be read."""

    def __init__(self, wanted: int, got: int) -> None:
        self.wanted = wanted
        self.got = got
        super().__init__(
            "Unexpected end of data: wanted {} byte(s), got {}".format(wanted, got)
        )


class BoundsError(InstrumentFormatError):
    """Raised when a decoded index or count falls outside its legal range.

    WHY: Pool indices and item counts come straight from the file. Using
    them unchecked would address pool entries that do not exist.

    RULES:
    - Message names the offending value and the limit
    """


class StaleHandleError(LookupError):
    """Raised when a SequenceHandle refers to a pool entry released since."""
