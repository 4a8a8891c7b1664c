"""Supreme dashboard service bootstrap."""
