"""Infrastructure helpers: settings, logging and export layout conventions."""
