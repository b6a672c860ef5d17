"""Game domain services: rules and lobby management.

``nim`` holds the pure game rules; ``manager`` loads and stores game
instances and is what HTTP routes and socket handlers import.
"""
