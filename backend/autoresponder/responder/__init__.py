"""Message response decision pipeline.

Matching and resolution only depend on the ports declared here, so the same
code runs against the SQLAlchemy store or an in-memory double.
"""
