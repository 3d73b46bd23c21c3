"""Record shapes and entity tags for the pregnancy dataset."""
__all__ = [
    'EntityType',
    'ClientRecord',
    'PregnancyRecord',
    'BirthRecord',
    'ChildRecord',
    'CareAfterRecord',
    'CareAfterPhoneRecord',
    'record_id',
]

def __getattr__(name):
    if name in __all__:
        from . import records
        return getattr(records, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
