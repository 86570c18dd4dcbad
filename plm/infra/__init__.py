"""Infrastructure: logging, database handle and statement auditing."""
