"""
Feature modules dispatched to by the command router.
"""
