"""Loggers that report test run results: summary, simple summary, verbose and xUnit XML."""