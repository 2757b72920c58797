class TrackerError(Exception):
    """Base class for errors surfaced to the user as a notice."""


class ImportFileError(TrackerError):
    """The JSON import file could not be parsed."""


class ReportReadError(TrackerError):
    """The report spreadsheet bytes could not be read."""
