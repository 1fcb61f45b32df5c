"""restockwatch: poll a page, email once when a term shows up."""

__version__ = "0.1.0"
