"""HTTP blueprints: employees_bp (/employees) and contacts_bp (/contacts)."""
