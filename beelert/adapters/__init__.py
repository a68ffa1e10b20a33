"""Integration adapters.

Adapters connect the AI gateway to external surfaces such as Discord.
"""
