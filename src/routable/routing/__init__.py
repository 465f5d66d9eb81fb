"""Routing — ordered route table with first-match lookup.

Routes are compiled when the router is constructed and, outside
production, frozen into an immutable lookup structure.
"""
