"""Output writers."""
__all__ = ['JsonWriter', 'ReportWriter', 'SkippedEntriesCSVWriter', 'StagedWriter']

def __getattr__(name):
    if name == 'JsonWriter':
        from .json_writer import JsonWriter
        return JsonWriter
    elif name == 'ReportWriter':
        from .report import ReportWriter
        return ReportWriter
    elif name == 'SkippedEntriesCSVWriter':
        from .csv_writer import SkippedEntriesCSVWriter
        return SkippedEntriesCSVWriter
    elif name == 'StagedWriter':
        from .staging import StagedWriter
        return StagedWriter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
