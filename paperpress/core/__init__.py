"""Core PaperPress components: credentials, retry machinery and paper generation."""
