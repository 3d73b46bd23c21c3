"""Data readers."""
__all__ = ['JsonRecordReader']

def __getattr__(name):
    if name == 'JsonRecordReader':
        from .json_reader import JsonRecordReader
        return JsonRecordReader
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
