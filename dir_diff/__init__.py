"""
dir-diff: content-hash directory comparison and deduplication.

Modules:
- hasher: xxHash64 streaming content fingerprint
- scanner: recursive tree walker building a fingerprint index
- index: fingerprint -> ordered paths mapping
- priority_engine: keeper selection for duplicate groups
- differ: files unique to one of two trees
- deleter: duplicate deletion with per-file failure tracking
- sweeper: bottom-up empty directory removal
- pipeline: diff / dedup orchestration
- report_generator: text and CSV reports
"""

__version__ = "0.2.0"
