"""Core of the checkout relay: configuration, models and Stripe services.

Nothing in this package depends on the HTTP layer (checkout_api).
"""
