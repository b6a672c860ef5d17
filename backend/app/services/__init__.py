"""Domain services: users, messages, chats and games.

Routes and socket handlers call into these modules; they own every
database write and raise ``ServiceError`` subclasses on failure, keeping
transport concerns separated from the domain rules.
"""
