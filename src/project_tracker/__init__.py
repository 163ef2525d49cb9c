"""Single-user task list with a flat-file store and a console front end."""

__version__ = "0.1.0"
