"""Static data tables: the component catalog and validation artifacts."""
