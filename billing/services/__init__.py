"""Service layer. Blueprints call in here; services flush, blueprints commit."""
