"""Task commands operating on a checklist document."""
