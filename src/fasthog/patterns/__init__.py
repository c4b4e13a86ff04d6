"""Built-in regular-expression pattern files used by the default pipeline."""
