"""Core infrastructure: paths, configuration, state, theming and errors."""
