"""Building blocks of a Handlebars-style template engine: values, paths, contexts, block scopes, grammar, helpers and errors."""

__version__ = "0.1.0"