"""
Static industry catalog: candidates, genre market tables and the activity feed.

Modules
-------
loader : IndustryCatalog model + load_catalog(): JSON files under
         ``config/catalog/``, validated on load, read-only afterwards.
"""
