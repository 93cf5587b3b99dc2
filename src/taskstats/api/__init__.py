"""API module for taskstats.

- Decodes request bodies and path parameters
- Forwards to the aggregation service and encodes its result
- Forbidden: SQL, aggregation arithmetic
"""
