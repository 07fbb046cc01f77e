"""Infrastructure layer — spreadsheet access, HTTP fetching, file output, templates."""
