# bootstrap/models.py
# No tables. The module exists so Django emits post_migrate for this app.
