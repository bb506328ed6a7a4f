"""Persistence layer of the chat application: users, their credentials and their messages."""
