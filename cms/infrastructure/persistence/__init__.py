"""SQLAlchemy persistence for the ordered-table record store."""
