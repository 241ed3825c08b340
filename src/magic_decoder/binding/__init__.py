"""Binding — field descriptor tables, tag-driven coercion, and JSON binding.

The coercion engine (``populate``) turns string-keyed path and query
values into typed dataclass fields; the body binder (``bind_json``) does
the same for a decoded JSON object.
"""
