"""Infrastructure layer — filesystem scanning, parsers, writer, graph engine."""
