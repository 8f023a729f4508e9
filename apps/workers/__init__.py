"""Workers app package: service provider profiles and browsing."""
