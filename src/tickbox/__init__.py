"""tickbox: a small to-do list backed by SQLite, with a console shell."""

__version__ = "0.1.0"
