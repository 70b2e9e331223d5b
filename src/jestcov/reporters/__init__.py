"""Reporters that render coverage results as a Jest-style text table."""
