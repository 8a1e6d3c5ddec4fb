"""Job board API: postings, companies, profiles and the application workflow."""

__version__ = "1.0.0"
