"""
Application Layer for the periodization engine.

This package contains:
- ports/: Abstract repository interfaces (what the engine needs)
- use_cases/: Lifecycle controller, cloning engine and metrics reads
- cache.py: Explicit plan cache shared by the use cases
- exceptions.py: Error taxonomy surfaced to callers
"""
