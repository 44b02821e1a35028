"""
                Delights by Jummy

Restaurant ordering website backend: public menu, cart checkout and
contact form, plus an admin panel for menu items, orders and messages.
Records live in local JSON files or a hosted SQL database.
"""

__version__ = "2.1.0"
