"""
                        Services Module

Business logic services with the strategy pattern: each concern has an
abstract base and interchangeable implementations chosen from config.

Services:
    - storage: menu, order and contact-message persistence (JSON files / SQL)
    - auth: admin login and token validation (in-memory / signed JWT)
"""
