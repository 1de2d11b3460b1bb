"""
Application Layer

Contains the use cases callers drive and the services orchestrating them.

Structure:
- queries/: Answer extractions for ad hoc player queries
- services/: Query coordination and the public player controller
"""
