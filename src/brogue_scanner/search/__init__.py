"""
Criteria compilation and the streaming match engine.

- criteria: compiled criterion records and count semantics
- compiler: token lists to criteria
- query: search aggregate and per-seed scratch state
- engine: row evaluation and per-file scanning
- models: match and report records
"""
