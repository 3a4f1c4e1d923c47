"""
Services for Braintrader

Stateful collaborators around the pure analytics: the record feed, user
sessions, authentication and notifications.
"""
