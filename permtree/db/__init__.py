"""SQLAlchemy persistence for permtree."""
