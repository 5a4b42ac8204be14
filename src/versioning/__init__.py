"""NuGet version resolution: models, requirement parsing, filters and the finder."""
