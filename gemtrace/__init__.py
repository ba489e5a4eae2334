"""gemtrace — resolve installed Ruby gems behind Bundler-generated gemspecs."""

__version__ = "0.1.0"
