"""Movie/TV catalog search: client, search/pagination controller and detail loader."""

__version__ = "0.1.0"
