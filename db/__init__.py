"""
db/ - Database Layer
====================
Handles PostgreSQL connections, scoped cursors and schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
