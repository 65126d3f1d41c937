"""Fingerprint discovery services.

Leaves first: filesystem, platform locator, certificate inspector,
fingerprint parser and device bridge feed the fingerprint aggregator;
reporter and prompter handle everything the user sees.
"""
