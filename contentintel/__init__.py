"""
Content Intelligence Dispatcher

Classifies submitted content (news claims, software links, images and
video, audio), checks feature flags and subscription tiers, delegates
the verdict to an LLM-backed engine and returns a schema-valid report
that falls back to a pessimistic verdict whenever the engine cannot be
trusted.
"""

__version__ = "1.0.0"
__author__ = "Content Intelligence Team"
