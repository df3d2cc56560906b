"""JobTrack: owner-scoped job application tracking.

Query builder, record writer, status and monthly-trend aggregation on top of
SQLAlchemy, served by FastAPI behind bearer-token auth.
"""

__version__ = "1.0.0"
