"""Configuration plumbing shared by the compressor and its tools."""
