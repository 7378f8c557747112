"""Search subsystem: record building, storage, querying and static indexes."""
